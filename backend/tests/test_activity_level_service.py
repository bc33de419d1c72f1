"""
Tests pour la classification par percentiles d'equipe.
"""
from datetime import date, timedelta
from uuid import uuid4

import pytest

from teamfuel.domain.entities.activity_level_daily import ActivityLevel, LevelSource
from teamfuel.domain.services.activity_level_service import (
    ComputedLevel,
    OverriddenLevel,
    TeamPercentiles,
    classify_activity_levels,
    classify_day,
    level_from_percentiles,
    team_percentiles,
)
from teamfuel.domain.services.rolling_load import RollingLoad

D = date(2026, 3, 14)

LEVEL_ORDER = [ActivityLevel.LOW, ActivityLevel.MODERATE, ActivityLevel.HIGH, ActivityLevel.VERY_HIGH]


def _rolling(values, team=None, day=D):
    team = team or uuid4()
    return [RollingLoad(uuid4(), team, day, v) for v in values]


class TestTeamPercentiles:
    def test_linear_interpolation(self):
        p = team_percentiles([2, 5, 5, 8, 20])
        assert (p.p25, p.p50, p.p75) == (5.0, 5.0, 8.0)

    def test_interpolates_between_order_statistics(self):
        p = team_percentiles([1, 2, 3, 4])
        assert p.p25 == pytest.approx(1.75)
        assert p.p50 == pytest.approx(2.5)
        assert p.p75 == pytest.approx(3.25)

    def test_order_independent(self):
        assert team_percentiles([20, 5, 8, 2, 5]) == team_percentiles([2, 5, 5, 8, 20])

    @pytest.mark.parametrize("values", [[], [4.0], [1.0, 9.0]])
    def test_small_groups_have_no_percentiles(self, values):
        assert team_percentiles(values) is None

    def test_rounded(self):
        p = TeamPercentiles(1.75, 2.5, 3.25).rounded()
        assert (p.p25, p.p50, p.p75) == (1.8, 2.5, 3.3)


class TestLevelFromPercentiles:
    P = TeamPercentiles(5.0, 5.0, 8.0)

    def test_boundaries_belong_to_lower_bin(self):
        assert level_from_percentiles(5.0, self.P) == ActivityLevel.LOW
        assert level_from_percentiles(8.0, self.P) == ActivityLevel.HIGH

    def test_bins(self):
        p = TeamPercentiles(2.0, 4.0, 6.0)
        assert level_from_percentiles(1.0, p) == ActivityLevel.LOW
        assert level_from_percentiles(3.0, p) == ActivityLevel.MODERATE
        assert level_from_percentiles(5.0, p) == ActivityLevel.HIGH
        assert level_from_percentiles(6.1, p) == ActivityLevel.VERY_HIGH


class TestClassifyDay:
    def test_team_of_five(self):
        """[2, 5, 5, 8, 20] -> p25=5, p50=5, p75=8."""
        rolling = _rolling([2, 5, 5, 8, 20])
        results = classify_day(rolling)
        assert [r.system_level for r in results] == [
            ActivityLevel.LOW,
            ActivityLevel.LOW,
            ActivityLevel.LOW,
            ActivityLevel.HIGH,
            ActivityLevel.VERY_HIGH,
        ]
        assert results[0].percentiles == TeamPercentiles(5.0, 5.0, 8.0)

    def test_value_above_p25_up_to_p50_is_moderate(self):
        rolling = _rolling([2, 4, 5, 8, 20])
        # p25=4, p50=5
        levels = [r.system_level for r in classify_day(rolling)]
        assert levels[2] == ActivityLevel.MODERATE

    @pytest.mark.parametrize("values", [[0.0], [100.0, 0.0]])
    def test_small_group_is_moderate(self, values):
        results = classify_day(_rolling(values))
        assert all(r.system_level == ActivityLevel.MODERATE for r in results)
        assert all(r.percentiles is None for r in results)

    def test_teams_ranked_separately(self):
        team_a, team_b = uuid4(), uuid4()
        rolling = _rolling([1, 2, 3, 4], team=team_a) + _rolling([100, 200], team=team_b)
        results = classify_day(rolling)
        by_team = {}
        for r in results:
            by_team.setdefault(r.team_id, []).append(r)
        assert by_team[team_a][0].percentiles == team_percentiles([1, 2, 3, 4])
        assert all(r.system_level == ActivityLevel.MODERATE for r in by_team[team_b])

    def test_effective_copies_system(self):
        results = classify_day(_rolling([1, 2, 3, 4, 5]))
        for r in results:
            assert r.effective == ComputedLevel(r.system_level)
            assert r.effective_level == r.system_level
            assert r.effective.source == LevelSource.COMPUTED

    def test_monotonic(self):
        """Une valeur strictement superieure n'a jamais un niveau strictement inferieur."""
        values = [0, 0, 1.5, 3, 3, 3, 7.2, 9, 12, 40]
        results = classify_day(_rolling(values))
        for a in results:
            for b in results:
                if a.avg_load_14d > b.avg_load_14d:
                    assert LEVEL_ORDER.index(a.system_level) >= LEVEL_ORDER.index(b.system_level)


class TestClassifyActivityLevels:
    def test_each_day_classified_independently(self):
        team = uuid4()
        ids = [uuid4() for _ in range(3)]
        day1, day2 = D - timedelta(days=1), D
        rolling = [RollingLoad(uid, team, day1, v) for uid, v in zip(ids, [1, 2, 3])]
        rolling += [RollingLoad(uid, team, day2, v) for uid, v in zip(ids, [3, 2, 1])]
        results = classify_activity_levels(rolling)
        assert len(results) == 6
        assert results[0].system_level == ActivityLevel.LOW
        assert results[3].system_level == ActivityLevel.VERY_HIGH
        assert results[5].system_level == ActivityLevel.LOW


class TestOverriddenLevel:
    def test_variant_shape(self):
        override = OverriddenLevel(ActivityLevel.LOW, by=uuid4(), reason="injury")
        assert override.source == LevelSource.OVERRIDE
        assert override.level == ActivityLevel.LOW
