"""Unit tests for result formatting helpers."""

from inferdev.utils.formatters import format_ratio, rank_scores


class TestRankScores:
    """Test ranking of job scores."""

    def test_descending_with_ratios(self):
        ranked = rank_scores({"frontend": 4, "backend": 10, "ai": 5})

        assert [entry["job_id"] for entry in ranked] == ["backend", "ai", "frontend"]
        assert [entry["ratio"] for entry in ranked] == [1.0, 0.5, 0.4]

    def test_ties_keep_original_order(self):
        ranked = rank_scores({"frontend": 3, "backend": 3, "ai": 7})

        assert [entry["job_id"] for entry in ranked] == ["ai", "frontend", "backend"]

    def test_non_positive_top_gives_zero_ratios(self):
        ranked = rank_scores({"frontend": 0, "backend": -2})

        assert [entry["ratio"] for entry in ranked] == [0.0, 0.0]

    def test_empty(self):
        assert rank_scores({}) == []


class TestFormatRatio:
    """Test percentage display."""

    def test_percentage(self):
        assert format_ratio(0.73) == "73%"
        assert format_ratio(1) == "100%"

    def test_clamped(self):
        assert format_ratio(1.7) == "100%"
        assert format_ratio(-0.2) == "0%"

    def test_missing(self):
        assert format_ratio(None) is None
