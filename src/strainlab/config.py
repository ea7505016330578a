"""Engine configuration.

Settings are read from environment variables prefixed with ``STRAINLAB_``
(or a ``.env`` file) and validated by pydantic.  Calculators validate the
values they are handed as well and raise :class:`ConfigurationError` rather
than silently coercing them.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from strainlab.analytics.pipeline import ScoreEngine


class ConfigurationError(ValueError):
    """A calculator was configured with a value that cannot produce a score."""


def require_positive(name: str, value: float) -> float:
    """Return *value* as a float, or raise if it is not a finite positive number."""
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number) or number <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")
    return number


class EngineSettings(BaseSettings):
    """Tunable parameters for the score engine."""

    max_heart_rate: float = Field(190.0, gt=0)
    sleep_need_minutes: float = Field(450.0, gt=0)

    baseline_window_days: int = Field(7, ge=1)
    baseline_min_days: Optional[int] = Field(None, ge=1)
    outlier_threshold: float = Field(1.5, gt=0)
    smoothing_window: int = Field(3, ge=1)

    # score = strain_scale * ln(1 + strain_rate * load), capped at 21
    strain_scale: float = Field(6.0, gt=0)
    strain_rate: float = Field(0.02, gt=0)

    hrv_deviation_span: float = Field(0.25, gt=0)
    rhr_deviation_span: float = Field(0.15, gt=0)

    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="STRAINLAB_", env_file=".env", extra="ignore",
    )

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=getattr(logging, self.log_level.upper(), logging.WARNING),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    def build_engine(self) -> "ScoreEngine":
        """Construct a :class:`ScoreEngine` wired with these settings."""
        from strainlab.analytics.baseline import BaselineEngine
        from strainlab.analytics.pipeline import ScoreEngine
        from strainlab.analytics.recovery import RecoveryCalculator, RecoveryCurve
        from strainlab.analytics.sleep import SleepCalculator
        from strainlab.analytics.strain import StrainCalculator, StrainCalibration

        return ScoreEngine(
            baseline=BaselineEngine(
                window_days=self.baseline_window_days,
                min_days=self.baseline_min_days,
                outlier_threshold=self.outlier_threshold,
                smoothing_window=self.smoothing_window,
            ),
            strain=StrainCalculator(
                StrainCalibration(scale=self.strain_scale, rate=self.strain_rate),
            ),
            sleep=SleepCalculator(),
            recovery=RecoveryCalculator(
                RecoveryCurve(
                    hrv_span=self.hrv_deviation_span,
                    rhr_span=self.rhr_deviation_span,
                ),
            ),
        )
