"""
Unit tests for auth, the dashboard view and the tracker session
"""
from unittest.mock import Mock

import pytest

from daytracker.services import AuthSession, DashboardView, DayFeed, TrackerSession, User

from conftest import DAY, OTHER_DAY, USER_ID, make_activities, run


@pytest.mark.unit
class TestAuthSession:
    """Sign-in state and listeners."""

    def test_sign_in_and_out(self):
        auth = AuthSession()
        events = []
        auth.on_auth_state_changed(events.append)

        auth.sign_in(User(uid="u1"))
        auth.sign_out()
        auth.sign_out()  # already signed out, no event

        assert auth.uid is None
        assert [e.uid if e else None for e in events] == ["u1", None]

    def test_sign_in_requires_uid(self):
        with pytest.raises(ValueError):
            AuthSession().sign_in(User(uid=""))

    def test_failing_listener_is_isolated(self):
        auth = AuthSession()
        broken = Mock(side_effect=RuntimeError("boom"))
        listener = Mock()
        auth.on_auth_state_changed(broken)
        auth.on_auth_state_changed(listener)

        user = User(uid="u1")
        auth.sign_in(user)

        broken.assert_called_once_with(user)
        listener.assert_called_once_with(user)

    def test_remove_listener(self):
        auth = AuthSession()
        events = []
        remove = auth.on_auth_state_changed(events.append)
        remove()

        auth.sign_in(User(uid="u1"))

        assert events == []


@pytest.mark.unit
class TestDayFeed:
    """Standalone feed behaviour."""

    def test_refresh_resubscribes_current_day(self, fake_gateway, auth):
        feed = DayFeed(fake_gateway, auth)
        seen = []
        feed.add_listener(seen.append)

        feed.refresh()  # nothing selected yet
        assert fake_gateway.subscriptions == []

        feed.select_day(DAY)
        first = fake_gateway.latest
        feed.refresh()

        assert feed.is_subscribed is True
        assert first.active is False
        assert len(fake_gateway.active) == 1
        assert seen == [feed, feed]

    def test_close_unsubscribes(self, fake_gateway, auth):
        feed = DayFeed(fake_gateway, auth)
        feed.select_day(DAY)

        feed.close()

        assert feed.is_subscribed is False
        assert fake_gateway.active == []


@pytest.mark.unit
class TestDashboardView:
    """Read-only analytics on its own day."""

    def test_summary_follows_feed(self, fake_gateway, auth):
        dashboard = DashboardView(fake_gateway, auth)
        dashboard.select_day(DAY)
        assert dashboard.has_data is False

        fake_gateway.latest.deliver(make_activities(("Emails", "work", 60), ("Night", "sleep", 480)))

        assert dashboard.has_data is True
        assert dashboard.summary().top_category == "sleep"
        assert dashboard.aggregator.category_totals() == {"work": 60, "sleep": 480}

    def test_listener_receives_view(self, fake_gateway, auth):
        dashboard = DashboardView(fake_gateway, auth)
        seen = []
        dashboard.add_listener(seen.append)

        dashboard.select_day(DAY)

        assert seen == [dashboard]


@pytest.mark.unit
class TestTrackerSession:
    """Auth wiring and day selection."""

    def test_signed_in_session_loads_both_days(self, gateway, auth):
        session = TrackerSession(gateway, auth, day=DAY)

        assert session.ledger.day == DAY
        assert session.dashboard.day == DAY
        assert gateway.subscriber_count(USER_ID, DAY) == 2
        session.close()

    def test_sign_in_subscribes(self, gateway):
        session = TrackerSession(gateway, day=DAY)
        assert gateway.subscriber_count(USER_ID, DAY) == 0

        session.auth.sign_in(User(uid=USER_ID))

        assert gateway.subscriber_count(USER_ID, DAY) == 2
        session.close()

    def test_sign_out_clears_views(self, gateway, auth):
        session = TrackerSession(gateway, auth, day=DAY)
        run(session.ledger.add_activity("Run", "exercise", 30))
        assert session.dashboard.has_data is True

        auth.sign_out()

        assert session.ledger.activities == []
        assert session.dashboard.activities == []
        assert gateway.subscriber_count(USER_ID, DAY) == 0

    def test_days_are_independent(self, gateway, auth):
        session = TrackerSession(gateway, auth, day=DAY)
        run(session.ledger.add_activity("Run", "exercise", 30))

        session.set_activity_day(OTHER_DAY)

        assert session.ledger.total_minutes() == 0
        assert session.dashboard.day == DAY
        assert session.dashboard.summary().total_minutes == 30
        session.close()

    def test_analyse_shows_activity_day(self, gateway, auth):
        session = TrackerSession(gateway, auth, day=DAY)
        session.set_dashboard_day(OTHER_DAY)
        session.set_activity_day("2026-01-15")

        session.analyse()

        assert session.dashboard_day == DAY
        assert session.dashboard.day == DAY
        session.close()

    def test_ledger_aggregator_tracks_ledger(self, gateway, auth):
        session = TrackerSession(gateway, auth, day=DAY)
        run(session.ledger.add_activity("Run", "exercise", 30))

        assert session.ledger_aggregator.top_category() == "exercise"
        session.close()

    def test_close_stops_auth_handling(self, gateway, auth):
        session = TrackerSession(gateway, auth, day=DAY)
        session.close()

        auth.sign_out()
        auth.sign_in(User(uid=USER_ID))

        assert gateway.subscriber_count(USER_ID, DAY) == 0
