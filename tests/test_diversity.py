"""
Tests for ranking and diversity-aware selection.
"""

import pytest

from pipelines.recommendation.diversity import company_cap, rank, select_diverse
from similarjobs.records import ScoredCandidate

from conftest import build_job, company

COMPANY_X = company("company-x", "X Systems")
COMPANY_Y = company("company-y", "Y Works")
COMPANY_Z = company("company-z", "Z Labs")


def scored(score, company_info=None, title="Engineer"):
    job = build_job(
        title=title,
        company_id=company_info.id if company_info else None,
        company=company_info,
    )
    return ScoredCandidate(job=job, score=score, factor_scores={}, base_score=score)


class TestCompanyCap:
    """Test the default per-company cap."""

    @pytest.mark.parametrize("limit,expected", [(1, 1), (2, 1), (3, 2), (4, 2), (5, 3), (10, 5)])
    def test_half_rounded_up(self, limit, expected):
        assert company_cap(limit) == expected


class TestRank:
    """Test ordering of scored candidates."""

    def test_descending(self):
        pool = [scored(0.2), scored(0.9), scored(0.5)]
        assert [s.score for s in rank(pool)] == [0.9, 0.5, 0.2]

    def test_ties_keep_input_order(self):
        pool = [scored(0.5, title=f"Role {i}") for i in range(5)]
        assert [s.job.title for s in rank(pool)] == [f"Role {i}" for i in range(5)]


class TestSelectDiverse:
    """Test top-K selection under the per-company cap."""

    def test_dominant_company_is_capped(self):
        """Ten strong X jobs and two weaker Y jobs, K=4: two of each."""
        pool = [scored(0.9 - i * 0.01, COMPANY_X) for i in range(10)]
        pool += [scored(0.5, COMPANY_Y), scored(0.4, COMPANY_Y)]

        selected = select_diverse(pool, 4)

        companies = [s.job.company_id for s in selected]
        assert companies.count("company-x") == 2
        assert companies.count("company-y") == 2
        assert [s.score for s in selected] == sorted((s.score for s in selected), reverse=True)
        assert [s.score for s in selected[:2]] == [pytest.approx(0.9), pytest.approx(0.89)]

    def test_fills_from_capped_company_when_pool_is_short(self):
        """When only one company is available K is still reached."""
        pool = [scored(0.9 - i * 0.1, COMPANY_X) for i in range(5)]

        selected = select_diverse(pool, 4)

        assert len(selected) == 4
        assert [s.score for s in selected] == [pytest.approx(v) for v in (0.9, 0.8, 0.7, 0.6)]

    def test_fill_keeps_rank_order(self):
        pool = [
            scored(0.95, COMPANY_X),
            scored(0.90, COMPANY_X),
            scored(0.85, COMPANY_X),
            scored(0.30, COMPANY_Y),
        ]

        selected = select_diverse(pool, 4)

        assert [s.score for s in selected] == [0.95, 0.90, 0.85, 0.30]

    def test_fewer_candidates_than_limit(self):
        pool = [scored(0.7, COMPANY_X), scored(0.6, COMPANY_Y)]
        assert len(select_diverse(pool, 10)) == 2

    def test_empty_pool(self):
        assert select_diverse([], 3) == []

    def test_zero_limit(self):
        assert select_diverse([scored(0.5, COMPANY_X)], 0) == []

    def test_explicit_cap(self):
        pool = [scored(0.9, COMPANY_X), scored(0.8, COMPANY_X), scored(0.7, COMPANY_Y), scored(0.6, COMPANY_Z)]

        selected = select_diverse(pool, 3, max_per_company=1)

        assert [s.job.company_id for s in selected] == ["company-x", "company-y", "company-z"]

    def test_jobs_without_company_share_a_bucket(self):
        pool = [scored(0.9), scored(0.8), scored(0.7), scored(0.6, COMPANY_X)]

        selected = select_diverse(pool, 2)

        assert [s.job.company_id for s in selected] == [None, "company-x"]

    def test_ties_resolved_by_input_order(self):
        pool = [scored(0.5, COMPANY_X, title=f"Role {i}") for i in range(3)]
        pool += [scored(0.5, COMPANY_Y, title=f"Role {i}") for i in range(3, 6)]

        selected = select_diverse(pool, 4)

        assert [s.job.title for s in selected] == ["Role 0", "Role 1", "Role 3", "Role 4"]

    def test_result_is_stable(self):
        pool = [scored(0.9 - (i % 3) * 0.1, [COMPANY_X, COMPANY_Y, COMPANY_Z][i % 3]) for i in range(9)]

        first = select_diverse(pool, 5)
        second = select_diverse(list(pool), 5)

        assert [s.job.id for s in first] == [s.job.id for s in second]
