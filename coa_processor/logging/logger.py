import logging
import sys


class Log:
    """Centralized logging for the COA processor.

    Keyword arguments are attached to the record as ``record.context`` and appended to
    the message as ``key=value`` pairs so render context (user, filename,
    layout) survives plain-text log shipping.
    """

    _logger: logging.Logger = logging.getLogger("coa_processor")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(cls._format(message, kwargs), extra={"context": kwargs})

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(cls._format(message, kwargs), extra={"context": kwargs})

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(cls._format(message, kwargs), extra={"context": kwargs})

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(cls._format(message, kwargs), extra={"context": kwargs})

    @staticmethod
    def _format(message: str, context: dict[str, object]) -> str:
        if not context:
            return message
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} [{pairs}]"
