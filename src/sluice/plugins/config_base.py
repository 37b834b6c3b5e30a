"""Base classes for typed DoFn configurations.

This module provides base classes that DoFns inherit from to get:
- Strict validation (reject unknown fields)
- Factory methods with clear error messages
- The timestamp skew setting every DoFn understands

Example usage:
    class TokenizeConfig(DoFnConfig):
        lowercase: bool = False

    cfg = TokenizeConfig.from_dict({"lowercase": True, "allowed_timestamp_skew": 5})
"""

from typing import Any, Self

from pydantic import BaseModel, ValidationError, field_validator

from sluice.core.config import parse_skew


class PluginConfigError(Exception):
    """Raised when plugin configuration is invalid."""


class PluginConfig(BaseModel):
    """Base class for typed plugin configurations.

    All DoFn configs should inherit from this class (usually via DoFnConfig).
    """

    model_config = {"extra": "forbid", "frozen": True}

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Create config from dict with clear error on validation failure.

        Args:
            config: Dictionary of configuration values.

        Returns:
            Validated configuration instance.

        Raises:
            PluginConfigError: If configuration is invalid.
        """
        try:
            return cls(**config)
        except ValidationError as e:
            raise PluginConfigError(
                f"Invalid configuration for {cls.__name__}: {e}"
            ) from e


class DoFnConfig(PluginConfig):
    """Configuration shared by all DoFns.

    allowed_timestamp_skew overrides the DoFn class default. It accepts
    seconds or "unbounded"; None means "use the class default".
    """

    allowed_timestamp_skew: float | None = None

    @field_validator("allowed_timestamp_skew", mode="before")
    @classmethod
    def validate_skew(cls, v: Any) -> float | None:
        """Parse seconds or 'unbounded'."""
        if v is None:
            return None
        return parse_skew(v)

    def options(self) -> dict[str, Any]:
        """DoFn-specific settings, as exposed through ctx.get()."""
        return self.model_dump(exclude={"allowed_timestamp_skew"})
