"""Pipeline configuration loaded from environment variables.

The conversion core takes its single tunable (``max_points``) as a
parameter; only the Functions entrypoint reads the environment, via
``PipelineConfig.from_env()``.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from kml_geometry.core.constants import (
    DEFAULT_MAX_RENDER_POINTS,
    DEFAULT_MAX_UPLOAD_BYTES,
    MIN_MAX_RENDER_POINTS,
)
from kml_geometry.core.exceptions import PipelineError


class ConfigValidationError(PipelineError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Immutable pipeline configuration.

    Attributes:
        max_render_points: Lines and rings longer than this are decimated.
        max_upload_bytes: Largest request body accepted by the HTTP layer.
    """

    max_render_points: int = DEFAULT_MAX_RENDER_POINTS
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES

    @classmethod
    def from_env(cls) -> PipelineConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``KML_MAX_RENDER_POINTS=abc``).
        """
        config = cls(
            max_render_points=int(
                os.getenv("KML_MAX_RENDER_POINTS", str(DEFAULT_MAX_RENDER_POINTS))
            ),
            max_upload_bytes=int(os.getenv("KML_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration ranges.  Raises ``ConfigValidationError``."""
        if self.max_render_points < MIN_MAX_RENDER_POINTS:
            raise ConfigValidationError(
                "KML_MAX_RENDER_POINTS",
                self.max_render_points,
                f"must be >= {MIN_MAX_RENDER_POINTS} (points)",
            )

        if self.max_upload_bytes <= 0:
            raise ConfigValidationError(
                "KML_MAX_UPLOAD_BYTES",
                self.max_upload_bytes,
                "must be > 0 (bytes)",
            )
