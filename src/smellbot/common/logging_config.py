"""
Centralized logging configuration for Smellbot.

Provides:
- Job ID context tracking via contextvars
- Custom formatter with abbreviated logger names and aligned output
- Setup function for consistent logging across the worker and the API
"""

import logging
import sys
from contextvars import ContextVar

# Submission id of the job currently being processed in this context
job_id_var: ContextVar[str] = ContextVar("job_id", default="-")

LOGGER_NAME_WIDTH = 32
JOB_ID_WIDTH = 12


def abbreviate_logger_name(name: str) -> str:
    """
    Abbreviate logger name for cleaner output.

    Examples:
        smellbot.jobs.handler -> s.jobs.handler
        smellbot.analysis.client -> s.a.client
        uvicorn.access -> uvicorn.access
    """
    abbreviations = [
        ("smellbot.", "s."),
        ("analysis.", "a."),
    ]
    result = name
    for full, short in abbreviations:
        result = result.replace(full, short)
    return result


class SmellbotFormatter(logging.Formatter):
    """
    Log formatter producing lines of the form
    ``timestamp | LEVEL | [job id] logger | message``.
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    # 23 (timestamp) + 3 + 5 (level) + 3 + 14 (job id) + 1 + 32 (name) + 3
    CONTINUATION_PREFIX = " " * 84

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        job_id = job_id_var.get()[:JOB_ID_WIDTH].ljust(JOB_ID_WIDTH)

        abbreviated_name = abbreviate_logger_name(record.name)
        padded_name = abbreviated_name[:LOGGER_NAME_WIDTH].ljust(LOGGER_NAME_WIDTH)

        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        timestamp_with_ms = f"{timestamp}.{int(record.msecs):03d}"

        level_name = record.levelname[:5].ljust(5)
        color = self.COLORS.get(record.levelname, "") if self.use_colors else ""
        colored_level = f"{color}{level_name}{self.RESET}" if color else level_name

        message = record.getMessage()
        if "\n" in message:
            lines = message.split("\n")
            message = (
                lines[0]
                + "\n"
                + "\n".join(self.CONTINUATION_PREFIX + line for line in lines[1:])
            )

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)

        log_line = (
            f"{timestamp_with_ms} | {colored_level} | [{job_id}] {padded_name} | {message}"
        )

        if record.exc_text:
            indented_exc = "\n".join(
                self.CONTINUATION_PREFIX + line for line in record.exc_text.split("\n")
            )
            log_line = f"{log_line}\n{indented_exc}"

        return log_line


def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Should be called once at application startup.

    Args:
        level: The log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(SmellbotFormatter(use_colors=sys.stdout.isatty()))

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    for logger_name in ["urllib3", "requests", "asyncio", "httpx", "httpcore"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    for uvicorn_logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        uvicorn_logger = logging.getLogger(uvicorn_logger_name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.addHandler(console_handler)
        uvicorn_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)


def get_job_id() -> str:
    """Get the current job ID, or "-" outside of a job."""
    return job_id_var.get()
