"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from inferdev.core.config import Settings


class TestSettings:
    """Test settings validation."""

    def test_recommender_url_normalised(self):
        settings = Settings(RECOMMENDER_API_URL="https://backend.example.com/api/")

        assert settings.RECOMMENDER_API_URL == "https://backend.example.com/api"

    def test_recommender_url_requires_scheme(self):
        with pytest.raises(ValidationError):
            Settings(RECOMMENDER_API_URL="backend.example.com/api")

    def test_api_prefix_normalised(self):
        assert Settings(API_V1_PREFIX="api/v2/").API_V1_PREFIX == "/api/v2"

    def test_unknown_survey_mode(self):
        with pytest.raises(ValidationError):
            Settings(SURVEY_MODE="three_stage")

    def test_metrics_off_in_tests(self):
        assert Settings(APP_ENV="test", ENABLE_METRICS=True).ENABLE_METRICS is False

    def test_production_hardening(self):
        settings = Settings(APP_ENV="production", APP_DEBUG=True, LOG_LEVEL="DEBUG")

        assert settings.APP_DEBUG is False
        assert settings.LOG_LEVEL == "INFO"
        assert settings.is_production()
