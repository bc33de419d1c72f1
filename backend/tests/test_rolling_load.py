"""
Tests pour la charge glissante 14 jours (jours manquants = 0).
"""
from datetime import date, timedelta
from uuid import uuid4

from teamfuel.domain.services.recalc_inputs import AthleteRef, LoadHistory
from teamfuel.domain.services.rolling_load import compute_rolling_loads, rolling_mean

D = date(2026, 3, 14)


def _history(user_id, loads_by_offset):
    """loads_by_offset: {jours avant D: charge}"""
    return LoadHistory(daily={
        user_id: {D - timedelta(days=off): load for off, load in loads_by_offset.items()}
    })


class TestRollingMean:
    def test_no_observation_is_zero(self):
        uid = uuid4()
        assert rolling_mean(LoadHistory(), uid, D) == 0.0

    def test_half_window_loaded(self):
        """[10]*7 puis [0]*7 -> 5.0"""
        uid = uuid4()
        history = _history(uid, {off: 10 for off in range(7, 14)})
        assert rolling_mean(history, uid, D) == 5.0

    def test_missing_days_count_as_zero(self):
        uid = uuid4()
        history = _history(uid, {0: 140})
        assert rolling_mean(history, uid, D) == 10.0

    def test_day_outside_window_ignored(self):
        uid = uuid4()
        history = _history(uid, {14: 1000, 13: 14})
        assert rolling_mean(history, uid, D) == 1.0

    def test_rounded_to_one_decimal(self):
        uid = uuid4()
        history = _history(uid, {0: 1})
        # 1 / 14 = 0.0714...
        assert rolling_mean(history, uid, D) == 0.1


class TestComputeRollingLoads:
    def test_defined_for_every_athlete_and_date(self):
        team = uuid4()
        a, b = AthleteRef(uuid4(), team), AthleteRef(uuid4(), team)
        dates = [D - timedelta(days=1), D]
        values = compute_rolling_loads([a, b], LoadHistory(), dates)
        assert len(values) == 4
        assert all(v.avg_load_14d == 0.0 for v in values)
        assert [(v.date, v.user_id) for v in values] == [
            (dates[0], a.user_id), (dates[0], b.user_id),
            (dates[1], a.user_id), (dates[1], b.user_id),
        ]

    def test_carries_team(self):
        team = uuid4()
        athlete = AthleteRef(uuid4(), team)
        values = compute_rolling_loads([athlete], _history(athlete.user_id, {0: 28}), [D])
        assert values[0].team_id == team
        assert values[0].avg_load_14d == 2.0
