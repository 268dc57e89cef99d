"""
Logging configuration for the chat client.

Console logging goes to stderr through rich so it does not mix with the
streamed reply on stdout. The TUI turns console logging off and relies on
the optional rotating log file.
"""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None, console: bool = True) -> logging.Logger:
    """
    Configure the root logger once per process.
    """
    root_logger = logging.getLogger()
    if getattr(root_logger, "_chat_cli_configured", False):
        return root_logger

    root_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root_logger.handlers.clear()

    if console:
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        root_logger.addHandler(file_handler)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(root_logger.level, logging.WARNING))

    root_logger._chat_cli_configured = True
    return root_logger
