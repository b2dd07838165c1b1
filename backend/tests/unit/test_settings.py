"""
Unit tests for application settings and service wiring.
"""

import json
import logging

import pytest
from pydantic import ValidationError

from infrastructure.config.settings import Settings
from infrastructure.logging_config import JSONFormatter, setup_logging, setup_logging_from_settings
from services import get_interlinking_service, get_related_posts_service, get_similarity_scorer
from services.content_similarity import SimilarityWeights


class TestSettings:
    """Tests for settings validation."""

    def test_defaults(self):
        s = Settings(_env_file=None)

        assert s.related_posts_default_limit == 6
        assert s.similarity_category_weight > s.similarity_tag_weight > s.similarity_text_weight

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SIMILARITY_TAG_WEIGHT", "3.5")
        monkeypatch.setenv("SIMILARITY_TITLE_BOOST_MODE", "Multiplicative")

        s = Settings(_env_file=None)

        assert s.similarity_tag_weight == 3.5
        assert s.similarity_title_boost_mode == "multiplicative"

    def test_pillar_thresholds_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("PILLAR_MIN_WORDS", "1500")
        monkeypatch.setenv("PILLAR_LINK_MIN_SCORE", "2.5")

        s = Settings(_env_file=None)

        assert s.pillar_min_words == 1500
        assert s.pillar_link_min_score == 2.5

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, similarity_category_weight=-1)

    def test_unknown_boost_mode_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, similarity_title_boost_mode="squared")

    def test_threshold_must_be_fraction(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, similarity_title_overlap_threshold=2)

    def test_default_limit_clamped_to_max(self):
        s = Settings(_env_file=None, related_posts_default_limit=100, related_posts_max_limit=20)

        assert s.related_posts_default_limit == 20

    def test_weights_from_settings(self):
        s = Settings(_env_file=None, similarity_text_weight=2.5, similarity_thin_excerpt_tokens=3)

        weights = SimilarityWeights.from_settings(s)

        assert weights.text_weight == 2.5
        assert weights.thin_excerpt_tokens == 3


class TestServiceWiring:
    """Tests for the settings-backed service singletons."""

    def test_singleton(self):
        assert get_related_posts_service() is get_related_posts_service()

    def test_configured_from_settings(self):
        from infrastructure.config.settings import settings

        service = get_related_posts_service()

        assert service.default_limit == settings.related_posts_default_limit
        assert service.max_limit == settings.related_posts_max_limit
        assert service.scorer.weights == SimilarityWeights.from_settings(settings)

    def test_interlinking_configured_from_settings(self):
        from infrastructure.config.settings import settings

        service = get_interlinking_service()

        assert service is get_interlinking_service()
        assert service.pillar_min_words == settings.pillar_min_words
        assert service.pillar_link_min_score == settings.pillar_link_min_score

    def test_services_share_scorer(self):
        assert get_interlinking_service().scorer is get_similarity_scorer()
        assert get_related_posts_service().scorer is get_similarity_scorer()


class TestLogging:
    """Tests for logging configuration."""

    def test_json_formatter_includes_extra_fields(self):
        record = logging.LogRecord("services.related_posts", logging.DEBUG, __file__, 1, "hello %s", ("x",), None)
        record.reference_slug = "seo-basics"
        record.tier_counts = {"similarity": 2}

        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "hello x"
        assert entry["level"] == "DEBUG"
        assert entry["reference_slug"] == "seo-basics"
        assert entry["tier_counts"] == {"similarity": 2}
        assert "pool_size" not in entry

    def test_setup_logging_replaces_handlers(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging(json_output=True, level="warning")

            assert root.level == logging.WARNING
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_setup_from_settings(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging_from_settings(Settings(_env_file=None, log_level="DEBUG", log_json=False))

            assert root.level == logging.DEBUG
            assert not isinstance(root.handlers[0].formatter, JSONFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
