"""Unit tests for score accumulation and selection."""

import pytest

from inferdev.models.catalog import Job, Option
from inferdev.services.scoring_service import (
    ScoringService,
    apply_option,
    apply_subfield_option,
    initial_scores,
    remove_option,
    remove_subfield_option,
    select_top,
    select_top_subfield,
)


def option(score, subfields=None):
    return Option(id=1, text="choice", score=score, subfield_scores=subfields or {})


class TestAccumulation:
    """Test applying and removing option points."""

    def test_initial_scores_keep_order(self):
        scores = initial_scores(["frontend", "backend", "ai"])

        assert scores == {"frontend": 0, "backend": 0, "ai": 0}
        assert list(scores) == ["frontend", "backend", "ai"]

    def test_apply_adds_only_mentioned_jobs(self):
        scores = apply_option({"frontend": 1, "backend": 2, "ai": 0}, option({"backend": 3, "ai": -1}))

        assert scores == {"frontend": 1, "backend": 5, "ai": -1}

    def test_apply_introduces_unknown_key(self):
        scores = apply_option({"frontend": 0}, option({"devops": 4}))

        assert scores == {"frontend": 0, "devops": 4}

    def test_apply_does_not_mutate_input(self):
        original = {"frontend": 0}
        apply_option(original, option({"frontend": 2}))

        assert original == {"frontend": 0}

    def test_remove_is_exact_inverse(self):
        start = {"frontend": 7, "backend": -2, "ai": 0}
        chosen = [option({"frontend": 3}), option({"backend": 5, "ai": 2}), option({"frontend": -1, "ai": 4})]

        scores = start
        for item in chosen:
            scores = apply_option(scores, item)
        for item in reversed(chosen):
            scores = remove_option(scores, item)

        assert scores == start

    def test_subfield_accumulation_round_trip(self):
        chosen = option({}, {"web": 2, "mobile": 1})

        scores = apply_subfield_option({}, chosen)
        assert scores == {"web": 2, "mobile": 1}
        assert remove_subfield_option(scores, chosen) == {"web": 0, "mobile": 0}


class TestSelection:
    """Test argmax with first-seen tie-break."""

    def test_tie_goes_to_first_key(self):
        assert select_top({"frontend": 10, "backend": 10, "ai": 5}) == "frontend"

    def test_clear_winner(self):
        assert select_top({"frontend": 1, "backend": 10, "ai": 5}) == "backend"

    def test_all_zero_picks_first(self):
        assert select_top({"frontend": 0, "backend": 0}) == "frontend"

    def test_negative_scores(self):
        assert select_top({"frontend": -3, "backend": -1}) == "backend"

    def test_empty_map(self):
        assert select_top({}) is None

    def test_subfield_prefers_highest_listed(self):
        job = Job(id="frontend", name="Frontend", subfields=["web", "mobile"])

        assert select_top_subfield(job, {"web": 1, "mobile": 3, "ml": 9}) == "mobile"

    def test_subfield_tie_goes_to_listed_first(self):
        job = Job(id="frontend", name="Frontend", subfields=["web", "mobile"])

        assert select_top_subfield(job, {"mobile": 2, "web": 2}) == "web"

    def test_subfield_falls_back_to_first_listed(self):
        job = Job(id="frontend", name="Frontend", subfields=["web", "mobile"])

        assert select_top_subfield(job, {"web": 0, "ml": 4}) == "web"

    def test_subfield_with_empty_name_can_win(self):
        job = Job(id="frontend", name="Frontend", subfields=["web", ""])

        assert select_top_subfield(job, {"": 3, "web": 1}) == ""

    def test_subfield_none_without_subfields(self):
        job = Job(id="ai", name="AI Engineer")

        assert select_top_subfield(job, {"ml": 1}) is None


class TestScoringService:
    """Test local recommendation scoring."""

    @pytest.fixture
    def scoring_service(self):
        return ScoringService()

    def test_all_points_to_one_job(self, scoring_service, small_catalog):
        result = scoring_service.score_locally(small_catalog, {"frontend": 10}, {})

        assert result.scores == {"frontend": 10, "backend": 0, "ai": 0}
        assert result.top_job == "frontend"
        assert result.top_subfield == "web"

    def test_scores_follow_catalog_order(self, scoring_service, small_catalog):
        result = scoring_service.score_locally(small_catalog, {"ai": 4, "backend": 4}, {"api": 0, "infra": 2})

        assert list(result.scores) == ["frontend", "backend", "ai"]
        assert result.top_job == "backend"
        assert result.top_subfield == "infra"

    def test_ranking_is_derived(self, scoring_service, small_catalog):
        result = scoring_service.score_locally(small_catalog, {"frontend": 2, "backend": 8, "ai": 4}, {})

        assert [entry.job_id for entry in result.ranking] == ["backend", "ai", "frontend"]
        assert [entry.ratio for entry in result.ranking] == [1.0, 0.5, 0.25]
