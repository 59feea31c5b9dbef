"""Root logging setup that keeps bot tokens out of the logs."""

import logging
import os
from typing import Iterable, Optional, Sequence, Set

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
REDACTED = "[REDACTED]"
_SENSITIVE_KEY_PARTS = ("TOKEN", "SECRET", "KEY", "PASS")
# httpx logs every Bot API request URL, which embeds the token.
_NOISY_LOGGERS = ("httpx", "httpcore")


def _sensitive_values(extra_values: Optional[Iterable[Optional[str]]] = None) -> Sequence[str]:
    values: Set[str] = {
        value
        for name, value in os.environ.items()
        if value and any(part in name.upper() for part in _SENSITIVE_KEY_PARTS)
    }
    for value in extra_values or ():
        if isinstance(value, str) and value:
            values.add(value)
    # Longest first so a secret containing another one is masked whole.
    return tuple(sorted(values, key=len, reverse=True))


class RedactingFormatter(logging.Formatter):
    """Delegate to ``base`` and mask every known secret in the result."""

    def __init__(
        self,
        base: Optional[logging.Formatter] = None,
        secrets: Sequence[str] = (),
    ) -> None:
        super().__init__()
        self._base = base or logging.Formatter(LOG_FORMAT)
        self._secrets: Sequence[str] = tuple(secrets)

    @property
    def secrets(self) -> Sequence[str]:
        return self._secrets

    def update_secrets(self, secrets: Sequence[str]) -> None:
        self._secrets = tuple(secrets)

    def format(self, record: logging.LogRecord) -> str:
        text = self._base.format(record)
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text


def _wrap_handler(handler: logging.Handler, secrets: Sequence[str]) -> None:
    formatter = handler.formatter
    if isinstance(formatter, RedactingFormatter):
        formatter.update_secrets(secrets)
    else:
        handler.setFormatter(RedactingFormatter(formatter, secrets))


def configure_logging(
    *,
    level: Optional[str] = None,
    extra_values: Optional[Iterable[Optional[str]]] = None,
) -> None:
    """Configure root logging and redact secrets from every handler."""

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root_logger.setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    secrets = _sensitive_values(extra_values)
    for handler in root_logger.handlers:
        _wrap_handler(handler, secrets)
    for logger_obj in list(logging.Logger.manager.loggerDict.values()):
        if isinstance(logger_obj, logging.Logger):
            for handler in logger_obj.handlers:
                _wrap_handler(handler, secrets)
