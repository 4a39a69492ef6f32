import logging
import os
import re
from typing import Any, Iterator

from branch_composer.infrastructure.observability.context import get_run_id


LOG_FORMAT = "%(asctime)s %(levelname)s [run_id=%(run_id)s] %(name)s - %(message)s"
REDACTED = "[REDACTED]"

# git echoes remote URLs back in fetch errors; the password part may be a token.
_URL_CREDENTIALS = re.compile(r"(?P<prefix>[a-z][a-z0-9+.-]*://[^:/@\s]+:)[^@\s]+(?=@)", re.IGNORECASE)
_registered_secrets: set[str] = set()


def register_sensitive_values(*values: str | None) -> None:
    _registered_secrets.update(value for value in values if value)


def _known_secrets() -> Iterator[str]:
    yield from _registered_secrets
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        yield token


def redact_secrets(text: str) -> str:
    for secret in _known_secrets():
        text = text.replace(secret, REDACTED)
    return _URL_CREDENTIALS.sub(lambda match: match.group("prefix") + REDACTED, text)


def configure_logging(level: int = logging.INFO) -> None:
    """Attach the run id to every record and install the default handler once."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    base_factory = logging.getLogRecordFactory()
    if getattr(base_factory, "adds_run_id", False):
        return

    def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
        record = base_factory(*args, **kwargs)
        record.run_id = get_run_id()
        return record

    record_factory.adds_run_id = True  # type: ignore[attr-defined]
    logging.setLogRecordFactory(record_factory)


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        value = " ".join(str(item) for item in value)
    elif not isinstance(value, str):
        value = repr(value)
    return redact_secrets(value).replace('"', '\\"')


def structured_message(event: str, **fields: Any) -> str:
    rendered = (f'{key}="{_render(value)}"' for key, value in fields.items() if value is not None)
    return " ".join([f"event={event}", *rendered])


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    logger.log(level, structured_message(event, **fields))
