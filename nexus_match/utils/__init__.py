"""
Utility modules for Nexus Match.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Application-wide constants
"""

from nexus_match.utils.config import (
    AppSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
    PACKAGE_DIR,
    DATA_DIR,
)
from nexus_match.utils.constants import (
    APP_NAME,
    APP_DISPLAY_NAME,
    VERSION,
    ApplicationStatus,
    AuditAction,
    ExperienceLevel,
    JobStatus,
    MatchStatus,
    MatchStrength,
    Sector,
    TrainingFormat,
    TrainingLanguage,
    Urgency,
)
from nexus_match.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
    LoggerMixin,
)

__all__ = [
    # Config
    "AppSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    "PACKAGE_DIR",
    "DATA_DIR",
    # Constants
    "APP_NAME",
    "APP_DISPLAY_NAME",
    "VERSION",
    "ApplicationStatus",
    "AuditAction",
    "ExperienceLevel",
    "JobStatus",
    "MatchStatus",
    "MatchStrength",
    "Sector",
    "TrainingFormat",
    "TrainingLanguage",
    "Urgency",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
    "LoggerMixin",
]
