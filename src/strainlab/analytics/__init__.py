"""Score calculation engine for strain, sleep and recovery.

Modules:
    stats        -- Statistics toolkit (mean, quartiles, outliers, smoothing)
    capabilities -- Abstract interfaces for the engine and calculators
    baseline     -- Rolling personal HRV / resting HR baselines
    strain       -- HR-zone strain scoring on the 0-21 scale
    sleep        -- Duration / efficiency / stage sleep scoring
    recovery     -- Baseline-relative recovery scoring
    hrv          -- HRV metrics and RR-interval cleaning
    quality      -- Data completeness assessment
    sleep_debt   -- Accumulated sleep debt
    consistency  -- Sleep schedule regularity
    insight      -- Combined daily readiness insight
    guidance     -- Recommended strain range
    summary      -- Daily summary aggregation
    pipeline     -- ScoreEngine orchestrating all of the above
"""

from strainlab.analytics.baseline import BaselineEngine, BaselineEstimate
from strainlab.analytics.strain import (
    StrainCalculator,
    StrainCalibration,
    StrainCategory,
    StrainScore,
    ZoneMinutes,
)
from strainlab.analytics.sleep import SleepCalculator, SleepScore
from strainlab.analytics.recovery import (
    RecoveryCalculator,
    RecoveryCategory,
    RecoveryCurve,
    RecoveryScore,
)
from strainlab.analytics.quality import DataQuality, assess_quality
from strainlab.analytics.sleep_debt import SleepDebt, calculate_sleep_debt
from strainlab.analytics.consistency import SleepConsistency, calculate_consistency
from strainlab.analytics.insight import DailyInsight, generate_insight
from strainlab.analytics.guidance import StrainGuidance, TrainingIntensity, calculate_guidance
from strainlab.analytics.summary import DailySummary, ScoreHistory, build_daily_summary
from strainlab.analytics.pipeline import DayInputs, ScoreEngine

__all__ = [
    # baseline
    "BaselineEngine",
    "BaselineEstimate",
    # strain
    "StrainCalculator",
    "StrainCalibration",
    "StrainCategory",
    "StrainScore",
    "ZoneMinutes",
    # sleep
    "SleepCalculator",
    "SleepScore",
    # recovery
    "RecoveryCalculator",
    "RecoveryCategory",
    "RecoveryCurve",
    "RecoveryScore",
    # quality
    "DataQuality",
    "assess_quality",
    # sleep debt
    "SleepDebt",
    "calculate_sleep_debt",
    # consistency
    "SleepConsistency",
    "calculate_consistency",
    # insight
    "DailyInsight",
    "generate_insight",
    # guidance
    "StrainGuidance",
    "TrainingIntensity",
    "calculate_guidance",
    # summary
    "DailySummary",
    "ScoreHistory",
    "build_daily_summary",
    # pipeline
    "DayInputs",
    "ScoreEngine",
]
