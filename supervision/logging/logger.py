import logging
import sys

LOGGER_NAME = "supervision"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(message)s"


class Log:
    """Process-wide logger; call sites pass f-string messages and optional extra fields."""

    _logger: logging.Logger = logging.getLogger(LOGGER_NAME)

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach a stdout handler once per process."""
        cls._logger.setLevel(log_level.upper())
        if cls._logger.handlers:
            return
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        cls._logger.addHandler(handler)

    @classmethod
    def _emit(cls, level: int, message: str, fields: dict[str, object]) -> None:
        cls._logger.log(level, message, extra=fields)

    @classmethod
    def debug(cls, message: str, **fields: object) -> None:
        cls._emit(logging.DEBUG, message, fields)

    @classmethod
    def info(cls, message: str, **fields: object) -> None:
        cls._emit(logging.INFO, message, fields)

    @classmethod
    def warning(cls, message: str, **fields: object) -> None:
        cls._emit(logging.WARNING, message, fields)

    @classmethod
    def error(cls, message: str, **fields: object) -> None:
        cls._emit(logging.ERROR, message, fields)

    @classmethod
    def exception(cls, message: str, **fields: object) -> None:
        """Log at error level with the traceback of the exception being handled."""
        cls._logger.exception(message, extra=fields)
