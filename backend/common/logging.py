"""
Common logging configuration for backend services.

The gateway relays bearer tokens and Supabase keys on almost every request, so
on top of the usual console/file sinks every record passes through a patcher
that masks anything looking like a credential before any sink sees it.

Log Files (when LOG_TO_FILE is enabled):
    - {service_name}.log: All logs at configured level (default: INFO)
    - {service_name}-error.log: Only ERROR level logs

Log Rotation:
    - Error logs: Rotate at 10 MB, retain 30 days, compress with zip
    - General logs: Rotate at 50 MB, retain 7 days, compress with zip

Example:
    ```python
    from common.logging import setup_logging

    setup_logging("auth-gateway")

    from loguru import logger
    logger.info("Gateway ready")
    ```
"""

from pathlib import Path
import re
import sys
from typing import Any, TextIO

from loguru import logger

from common.config import get_settings

REDACTED = "***"

# Bearer credentials, then bare JWTs (Supabase anon/service keys and access tokens)
CREDENTIAL_PATTERNS = (
    re.compile(r"(?i)(bearer\s+)[A-Za-z0-9\-_.=]+"),
    re.compile(r"eyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+"),
)

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[service]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[service]} | "
    "{name}:{function}:{line} | {message}"
)

# Tracebacks keep the call chain but never frame locals (request bodies, passwords)
SINK_OPTIONS = {"backtrace": False, "diagnose": False}


def redact_credentials(text: str) -> str:
    """Mask bearer tokens and JWT-shaped keys in ``text``."""
    bearer, jwt = CREDENTIAL_PATTERNS
    text = bearer.sub(lambda m: m.group(1) + REDACTED, text)
    return jwt.sub(REDACTED, text)


def _redact_record(record: dict[str, Any]) -> None:
    record["message"] = redact_credentials(record["message"])


def setup_logging(service_name: str | None = None, console: TextIO | None = None) -> None:
    """
    Configure loguru for a service.

    Args:
        service_name: Name of the service (e.g., "auth-gateway"). Used to tag
            every record and to name the log files. If None, generic names are used.
        console: Stream for the console sink. Defaults to sys.stdout.

    Side Effects:
        - Replaces all loguru handlers (safe to call more than once)
        - Installs the credential-redacting patcher
        - Disables loguru's variable-annotated tracebacks on every sink
        - When LOG_TO_FILE is true, creates 'logs' and adds rotating file handlers

    Note:
        File sinks are off by default; serverless hosts usually have a read-only filesystem.
    """
    settings = get_settings(service_name)

    logger.remove()
    logger.configure(
        extra={"service": service_name or "app"},
        patcher=_redact_record,
    )

    logger.add(
        console or sys.stdout,
        format=CONSOLE_FORMAT,
        level=settings.LOG_LEVEL,
        colorize=console is None,
        **SINK_OPTIONS,
    )

    if not settings.LOG_TO_FILE:
        return

    logs_dir = Path("logs")
    logs_dir.mkdir(exist_ok=True)
    stem = service_name or "app"

    logger.add(
        logs_dir / f"{stem}-error.log",
        format=FILE_FORMAT,
        level="ERROR",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        **SINK_OPTIONS,
    )
    logger.add(
        logs_dir / f"{stem}.log",
        format=FILE_FORMAT,
        level=settings.LOG_LEVEL,
        rotation="50 MB",
        retention="7 days",
        compression="zip",
        **SINK_OPTIONS,
    )
