import json
import logging

REQUEST_FIELDS = ("request_id", "method", "url", "path", "status_code", "latency_ms")
BACKEND_FIELDS = ("error_kind", "video_id", "percent")


class JsonLogFormatter(logging.Formatter):
    def __init__(self, fields: tuple[str, ...] = REQUEST_FIELDS + BACKEND_FIELDS) -> None:
        super().__init__()
        self.fields = fields

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, getattr(record, key))
            for key in self.fields
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Install one stream handler on the root logger; no-op if one exists.

    Called by application entry points only, never by library code.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.addHandler(handler)
