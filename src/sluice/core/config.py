"""
Runtime configuration for sluice.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import math
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

# Default bound on the number of side output tags per transform.
DEFAULT_MAX_SIDE_OUTPUT_TAGS = 1000

# Sentinel accepted wherever a timestamp skew is configured.
UNBOUNDED = "unbounded"
UNBOUNDED_SKEW = math.inf


def parse_skew(value: Any) -> float:
    """Normalize a configured timestamp skew to float seconds.

    Accepts non-negative numbers and the string "unbounded" (any case).

    Raises:
        ValueError: If the value is negative, NaN, or not a recognized form.
    """
    if isinstance(value, str):
        if value.strip().lower() == UNBOUNDED:
            return UNBOUNDED_SKEW
        try:
            value = float(value)
        except ValueError:
            raise ValueError(
                f"timestamp skew must be a number of seconds or '{UNBOUNDED}', got {value!r}"
            ) from None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"timestamp skew must be a number of seconds, got {value!r}")
    skew = float(value)
    if math.isnan(skew) or skew < 0:
        raise ValueError(f"timestamp skew must be non-negative, got {value!r}")
    return skew


class LoggingSettings(BaseModel):
    """Logging output configuration.

    Example YAML:
        logging:
          level: DEBUG
          json_output: true
    """

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level",
    )
    json_output: bool = Field(
        default=False,
        description="Emit JSON lines instead of console output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.upper()
        return v


class RuntimeSettings(BaseModel):
    """Top-level settings for the element-processing runtime.

    Example YAML:
        max_side_output_tags: 500
        logging:
          level: DEBUG
    """

    model_config = {"frozen": True, "extra": "forbid"}

    max_side_output_tags: int = Field(
        default=DEFAULT_MAX_SIDE_OUTPUT_TAGS,
        gt=0,
        description="Maximum number of distinct side output tags per transform",
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: Path) -> RuntimeSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (SLUICE_*) - highest priority
    2. Config file (settings.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: SLUICE_LOGGING__LEVEL for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated RuntimeSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Explicit check for file existence (Dynaconf silently accepts missing files)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="SLUICE",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; convert to lowercase for Pydantic
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {
        k.lower(): _lower_keys(v)
        for k, v in dynaconf_settings.as_dict().items()
        if k not in internal_keys
    }
    return RuntimeSettings(**raw_config)


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value


def resolve_config(settings: RuntimeSettings) -> dict[str, Any]:
    """Convert validated settings to a dict for logging at startup.

    Args:
        settings: Validated RuntimeSettings instance

    Returns:
        Dict representation suitable for JSON serialization
    """
    return settings.model_dump(mode="json")


def format_skew(skew: float) -> float | str:
    """Render a skew for logs and JSON, which have no infinity."""
    return UNBOUNDED if math.isinf(skew) else skew
