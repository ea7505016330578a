"""Tests for strainlab.analytics.quality -- data completeness."""

import pytest

from strainlab.analytics.quality import (
    ConfidenceLevel,
    assess_quality,
    baseline_maturity,
    baseline_status,
)


class TestAssessQuality:
    def test_complete_data(self):
        quality = assess_quality(
            hrv_values=[50.0, 52.0, 51.0],
            rhr_values=[55.0] * 30,
            sleep_minutes=450.0,
            activity_minutes=60.0,
            days_covered=30,
        )
        assert quality.overall_confidence == pytest.approx(1.0)
        assert quality.confidence_level == ConfidenceLevel.HIGH
        assert quality.warnings == ()
        assert quality.hrv_data_available
        assert quality.activity_data_available

    def test_no_data(self):
        quality = assess_quality([], [], None, 0.0, 0)
        # only the baseline maturity floor contributes
        assert quality.overall_confidence == pytest.approx(0.20 * 0.2)
        assert quality.confidence_level == ConfidenceLevel.LOW
        assert not quality.sleep_data_available
        assert not quality.rhr_data_available
        assert len(quality.warnings) == 4

    def test_moderate(self):
        quality = assess_quality([50.0], [55.0] * 10, 400.0, 0.0, 10)
        # 0.35*0.4 + 0.20*0.8 + 0.25*1.0 + 0.20*0.7 = 0.69
        assert quality.overall_confidence == pytest.approx(0.69)
        assert quality.confidence_level == ConfidenceLevel.MODERATE
        assert quality.warnings == ("Limited HRV data available",)


class TestBaselineStatus:
    def test_maturity_steps(self):
        assert baseline_maturity(0) == 0.2
        assert baseline_maturity(5) == 0.4
        assert baseline_maturity(10) == 0.7
        assert baseline_maturity(20) == 0.9
        assert baseline_maturity(40) == 1.0

    def test_phases(self):
        assert baseline_status(1).phase == "Initial"
        assert baseline_status(7).phase == "Established"
        assert baseline_status(7).progress == pytest.approx(0.5)
        assert baseline_status(60).progress == 1.0
