from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# third-party loggers that are too chatty at DEBUG/INFO
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "multipart": logging.INFO,
    "python_multipart": logging.INFO,
}


def _level(name: str, default: int) -> int:
    value = logging.getLevelName((name or "").upper())
    return value if isinstance(value, int) else default


def _access_parts(record: logging.LogRecord):
    """(method, path, status) of a uvicorn access record, or None."""
    args = record.args
    if record.name != "uvicorn.access" or not isinstance(args, tuple) or len(args) < 5:
        return None
    _, method, path, _, status = args[:5]
    return method, str(path), status


class _ConsoleFormatter(logging.Formatter):
    COLORS = {
        logging.DEBUG: "\033[90m",     # gray
        logging.INFO: "\033[94m",      # blue
        logging.WARNING: "\033[93m",   # yellow
        logging.ERROR: "\033[91m",     # red
        logging.CRITICAL: "\033[95m",  # magenta
    }
    RESET = "\033[0m"

    def __init__(self, *, color: bool = True):
        super().__init__(fmt="%(levelname)s %(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        # copy: the file handler formats the same record
        record = logging.makeLogRecord(record.__dict__)

        parts = _access_parts(record)
        if parts is not None:
            method, path, status = parts
            record.msg, record.args = "%s %s -> %s", (method, path, status)

        if self.color:
            color = self.COLORS.get(record.levelno, self.RESET)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class _DropAccessNoise(logging.Filter):
    """Drop uvicorn access lines for static assets and health probes."""

    NOISY_PREFIXES = ("/static/", "/health", "/favicon.ico")

    def filter(self, record: logging.LogRecord) -> bool:
        parts = _access_parts(record)
        if parts is None:
            return True
        return not parts[1].startswith(self.NOISY_PREFIXES)


def _console_handler(level: int) -> logging.Handler:
    h = logging.StreamHandler(sys.stdout)
    h.setLevel(level)
    h.setFormatter(_ConsoleFormatter(color=sys.stdout.isatty()))
    h.addFilter(_DropAccessNoise())
    return h


def _file_handler(path: Path, level: int) -> logging.Handler:
    h = logging.handlers.RotatingFileHandler(
        filename=str(path),
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    h.setLevel(level)
    h.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    h.addFilter(_DropAccessNoise())
    return h


def setup_logging(
    *,
    log_dir: str = "logs",
    log_file: str = "quizmaster.log",
    console_level: str = "INFO",
    file_level: str = "DEBUG",
) -> Path:
    """
    Route the app, uvicorn and library loggers through two root handlers:
    a console one and a rotating file under log_dir. Returns the log file path.
    """
    log_path = Path(log_dir) / log_file
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(_console_handler(_level(console_level, logging.INFO)))
    root.addHandler(_file_handler(log_path, _level(file_level, logging.DEBUG)))

    # server.py runs uvicorn with log_config=None, so it must not keep handlers of its own
    for name in UVICORN_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    root.debug("Logging initialized. log_path=%s", log_path.resolve())
    return log_path
