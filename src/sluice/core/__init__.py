"""Core infrastructure: configuration and logging."""

from sluice.core.config import (
    DEFAULT_MAX_SIDE_OUTPUT_TAGS,
    UNBOUNDED_SKEW,
    LoggingSettings,
    RuntimeSettings,
    format_skew,
    load_settings,
    parse_skew,
    resolve_config,
)
from sluice.core.logging import (
    configure_from_settings,
    configure_logging,
    get_logger,
)

__all__ = [
    "DEFAULT_MAX_SIDE_OUTPUT_TAGS",
    "UNBOUNDED_SKEW",
    "LoggingSettings",
    "RuntimeSettings",
    "configure_from_settings",
    "configure_logging",
    "format_skew",
    "get_logger",
    "load_settings",
    "parse_skew",
    "resolve_config",
]
