"""
Logging infrastructure for Nexus Match.

Uses Loguru for console and rotating file output. Job lifecycle changes
and booking feedback are also written to a separate audit sink, tagged
with an audit type derived from the action.
"""

import sys
from typing import Any, Optional

from loguru import logger

from nexus_match.utils.config import LoggingSettings, get_settings
from nexus_match.utils.constants import AuditAction

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
AUDIT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {extra[audit_type]: <9} | {message}"

AUDIT_TYPES: dict[AuditAction, str] = {
    AuditAction.JOB_CREATED: "LIFECYCLE",
    AuditAction.JOB_STATUS_CHANGED: "LIFECYCLE",
    AuditAction.JOB_DELETED: "LIFECYCLE",
    AuditAction.JOB_DUPLICATED: "LIFECYCLE",
    AuditAction.MATCH_FEEDBACK: "FEEDBACK",
}

# Credentials can reach audit details through database or settings dumps
REDACTED_KEYS = ("password", "secret", "token", "api_key")
FREE_TEXT_LIMIT = 200


def _is_audit_record(record: dict[str, Any]) -> bool:
    return "audit_type" in record["extra"]


def _add_file_sinks(log_settings: LoggingSettings, diagnose: bool) -> None:
    log_file = log_settings.file_path
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_file,
        format=log_settings.format,
        level=log_settings.level,
        rotation=log_settings.rotation,
        retention=log_settings.retention,
        compression="zip",
        backtrace=True,
        diagnose=diagnose,
        enqueue=True,  # Thread-safe logging
    )

    audit_file = log_settings.audit_file_path or log_file.parent / "audit.log"
    audit_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        audit_file,
        format=AUDIT_FORMAT,
        level="INFO",
        filter=_is_audit_record,
        rotation=log_settings.rotation,
        retention=log_settings.audit_retention,
        compression="zip",
        enqueue=True,
    )


def setup_logging() -> None:
    """
    Configure application-wide logging.

    Replaces Loguru's default handler with the configured console sink
    and, when file output is enabled, the rotating log and audit files.
    """
    settings = get_settings()
    log_settings = settings.logging

    logger.remove()

    # Variable values stay out of tracebacks outside development
    diagnose = settings.debug and settings.environment == "development"

    if log_settings.console_output:
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=log_settings.level,
            colorize=True,
            backtrace=True,
            diagnose=diagnose,
        )

    if log_settings.file_output:
        _add_file_sinks(log_settings, diagnose)

    logger.info(f"Logging initialized - Level: {log_settings.level}")


def get_logger(name: str) -> Any:
    """
    Get a logger instance with the specified name.

    Args:
        name: The name for the logger (typically __name__)

    Returns:
        A configured logger instance
    """
    return logger.bind(name=name)


def redact_details(data: Any) -> Any:
    """Mask credential fields and clip long free text in audit details."""
    if isinstance(data, dict):
        return {
            key: "***REDACTED***"
            if any(part in str(key).lower() for part in REDACTED_KEYS)
            else redact_details(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact_details(item) for item in data]
    if isinstance(data, str) and len(data) > FREE_TEXT_LIMIT:
        return data[:FREE_TEXT_LIMIT] + "..."
    return data


def audit_log(
    action: AuditAction | str,
    details: dict[str, Any],
    audit_type: Optional[str] = None,
) -> None:
    """
    Write an audit entry.

    Args:
        action: The audited action (e.g. AuditAction.JOB_STATUS_CHANGED)
        details: Identifiers and values describing the event
        audit_type: Sink tag; derived from the action when omitted
    """
    action = AuditAction(action)
    tag = audit_type or AUDIT_TYPES[action]
    logger.bind(audit_type=tag, audit_action=action.value).info(
        f"{action.value} | {redact_details(details)}"
    )


class LoggerMixin:
    """Gives a class a `logger` bound to its class name."""

    @property
    def logger(self) -> Any:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
