"""
Tests des lectures du recalcul : roster, historique de charge, composition corporelle.
"""
from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from teamfuel.domain.services.recalc_inputs import (
    load_inputs,
    load_latest_body_compositions,
    load_roster,
    load_training_history,
)
from teamfuel.domain.services.recalc_window import resolve_window

from conftest import add_athlete, add_inbody, add_load

TODAY = date(2026, 3, 15)
NOW = datetime(2026, 3, 15, 3, 0, tzinfo=timezone.utc)


class TestLoadRoster:
    def test_only_active_athletes_with_team(self, session):
        team = uuid4()
        kept = add_athlete(session, team, height_cm=180)
        add_athlete(session, None)
        add_athlete(session, team, role="coach")
        add_athlete(session, team, is_active=False)

        roster = load_roster(session)

        assert [a.user_id for a in roster] == [kept.id]
        assert roster[0].team_id == team
        assert roster[0].height_cm == 180

    def test_empty(self, session):
        assert load_roster(session) == ()


class TestLoadTrainingHistory:
    def test_range_is_inclusive(self, session):
        user = add_athlete(session, uuid4())
        start, end = date(2026, 3, 1), date(2026, 3, 14)
        add_load(session, user.id, start - timedelta(days=1), 99)
        add_load(session, user.id, start, 10)
        add_load(session, user.id, end, 20)
        add_load(session, user.id, end + timedelta(days=1), 99)

        history = load_training_history(session, start, end)

        assert history.daily[user.id] == {start: 10.0, end: 20.0}
        assert history.observations == 2

    def test_same_day_loads_are_summed(self, session):
        user = add_athlete(session, uuid4())
        day = date(2026, 3, 10)
        add_load(session, user.id, day, 300)
        add_load(session, user.id, day, 150)

        history = load_training_history(session, day, day)

        assert history.load_on(user.id, day) == 450.0

    @pytest.mark.parametrize("bad", [None, -40.0])
    def test_missing_or_negative_load_counts_as_zero(self, session, bad):
        user = add_athlete(session, uuid4())
        day = date(2026, 3, 10)
        add_load(session, user.id, day, bad)
        add_load(session, user.id, day, 60)

        history = load_training_history(session, day, day)

        assert history.load_on(user.id, day) == 60.0

    def test_ineligible_users_ignored(self, session):
        coach = add_athlete(session, uuid4(), role="coach")
        no_team = add_athlete(session, None)
        day = date(2026, 3, 10)
        add_load(session, coach.id, day, 100)
        add_load(session, no_team.id, day, 100)

        assert load_training_history(session, day, day).daily == {}


class TestLoadLatestBodyCompositions:
    def test_latest_date_wins(self, session):
        user = add_athlete(session, uuid4())
        add_inbody(session, user.id, date(2026, 2, 1), weight=72, height=178, body_fat_percent=14)
        add_inbody(session, user.id, date(2026, 3, 1), weight=70, body_fat_percent=15)

        body = load_latest_body_compositions(session, TODAY, NOW)[user.id]

        assert body.measured_at == date(2026, 3, 1)
        assert body.weight == 70.0
        assert body.height_cm is None
        assert body.body_fat_percent == 15.0

    def test_same_day_latest_timestamp_wins(self, session):
        user = add_athlete(session, uuid4())
        day = date(2026, 3, 10)
        add_inbody(session, user.id, day, weight=71, measured_at_ts=datetime(2026, 3, 10, 7, 0, tzinfo=timezone.utc))
        add_inbody(session, user.id, day, weight=69, measured_at_ts=datetime(2026, 3, 10, 19, 0, tzinfo=timezone.utc))
        add_inbody(session, user.id, day, weight=80)

        body = load_latest_body_compositions(session, TODAY, NOW)[user.id]

        assert body.weight == 69.0

    def test_future_measurements_excluded(self, session):
        user = add_athlete(session, uuid4())
        add_inbody(session, user.id, date(2026, 3, 1), weight=70)
        add_inbody(session, user.id, TODAY + timedelta(days=1), weight=90)
        add_inbody(session, user.id, TODAY, weight=95, measured_at_ts=datetime(2026, 3, 15, 9, 0, tzinfo=timezone.utc))

        body = load_latest_body_compositions(session, TODAY, NOW)[user.id]

        assert body.weight == 70.0

    def test_athlete_without_measurement_absent(self, session):
        user = add_athlete(session, uuid4())
        assert user.id not in load_latest_body_compositions(session, TODAY, NOW)


class TestLoadInputs:
    @pytest.mark.parametrize("parallel", [True, False])
    def test_assembles_all_sources(self, session, session_factory, parallel):
        team = uuid4()
        user = add_athlete(session, team, height_cm=175)
        window = resolve_window(3, "Asia/Tokyo", NOW)
        add_load(session, user.id, window.load_start, 50)
        add_load(session, user.id, window.load_start - timedelta(days=1), 999)
        add_inbody(session, user.id, date(2026, 3, 1), weight=70)

        inputs = load_inputs(session_factory, window, TODAY, NOW, parallel=parallel)

        assert [a.user_id for a in inputs.athletes] == [user.id]
        assert inputs.load_history.daily == {user.id: {window.load_start: 50.0}}
        assert inputs.body_compositions[user.id].weight == 70.0


class TestBodyCompositionCleaning:
    @pytest.mark.parametrize("body_fat", [150.0, 100.0, -3.0, float("nan")])
    def test_out_of_range_body_fat_is_unknown(self, session, body_fat):
        user = add_athlete(session, uuid4())
        add_inbody(session, user.id, date(2026, 3, 1), weight=70, height=175, body_fat_percent=body_fat)

        body = load_latest_body_compositions(session, TODAY, NOW)[user.id]

        assert body.body_fat_percent is None
        assert body.weight == 70.0

    @pytest.mark.parametrize("weight", [0.0, -70.0, float("inf")])
    def test_non_positive_weight_is_missing(self, session, weight):
        user = add_athlete(session, uuid4())
        add_inbody(session, user.id, date(2026, 3, 1), weight=weight, height=175)

        body = load_latest_body_compositions(session, TODAY, NOW)[user.id]

        assert body.weight is None
        assert body.height_cm == 175.0

    def test_non_positive_heights_are_missing(self, session):
        user = add_athlete(session, uuid4(), height_cm=-1)
        add_inbody(session, user.id, date(2026, 3, 1), weight=70, height=0)

        assert load_roster(session)[0].height_cm is None
        assert load_latest_body_compositions(session, TODAY, NOW)[user.id].height_cm is None
