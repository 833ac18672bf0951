from datetime import timedelta

import pytest
from hypothesis import given, strategies as st

from pixmatch.config import Settings


class TestSettings:
    def test_default_values(self):
        """Defaults mirror the tuned matching behaviour."""
        settings = Settings()
        assert settings.match_threshold == 0.75
        assert settings.score_precision == 3
        assert settings.time_window == timedelta(minutes=5)
        assert settings.file_type == "jpg"
        assert settings.processed_log_name == "processed.txt"
        assert settings.thumbnail_format == "PNG"
        assert settings.thumbnail_quality == 100
        assert settings.cutoff is None
        assert settings.delete_replaced is False

    def test_custom_values(self):
        settings = Settings(match_threshold=0.9, file_type=".png", time_window=timedelta(minutes=1))
        assert settings.match_threshold == 0.9
        assert settings.file_type == "png"
        assert settings.time_window == timedelta(minutes=1)

    @pytest.mark.parametrize("kwargs", [
        {"match_threshold": 1.5},
        {"match_threshold": -0.1},
        {"score_precision": -1},
        {"time_window": timedelta(minutes=-1)},
        {"thumbnail_quality": 101},
        {"delete_retries": 0},
        {"file_type": "."},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            Settings(**kwargs)


class TestConfigValidation:
    @given(threshold=st.floats(min_value=0.0, max_value=1.0))
    def test_thresholds_in_unit_interval_accepted(self, threshold):
        assert Settings(match_threshold=threshold).match_threshold == threshold

    @given(quality=st.integers(min_value=101, max_value=10000))
    def test_quality_above_hundred_rejected(self, quality):
        with pytest.raises(ValueError):
            Settings(thumbnail_quality=quality)
