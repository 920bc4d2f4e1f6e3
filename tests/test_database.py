"""
Integration tests for the SQLite gateway
"""
import sqlite3
from unittest.mock import Mock, patch

import pytest

from daytracker.api.database import SQLiteGateway
from daytracker.api.gateway import GatewayError
from daytracker.models import ActivityDraft
from daytracker.services.ledger import ActivityLedger

from conftest import DAY, OTHER_DAY, USER_ID, run


@pytest.fixture
def db(tmp_path):
    return SQLiteGateway(tmp_path / "data" / "test.db")


@pytest.mark.integration
class TestSQLiteGateway:
    """CRUD and live snapshots."""

    def test_init_creates_file(self, tmp_path):
        path = tmp_path / "nested" / "tracker.db"
        SQLiteGateway(path)
        assert path.exists()

    def test_create_and_read_back(self, db):
        activity_id = run(db.create(USER_ID, DAY, ActivityDraft("Read", "study", 45)))

        activities = db.get_day_activities(USER_ID, DAY)

        assert len(activities) == 1
        assert activities[0].id == activity_id
        assert activities[0].duration == 45
        assert activities[0].created_at is not None
        assert activities[0].updated_at is None

    def test_days_and_users_are_isolated(self, db):
        run(db.create(USER_ID, DAY, ActivityDraft("Read", "study", 45)))
        run(db.create(USER_ID, OTHER_DAY, ActivityDraft("Run", "exercise", 30)))
        run(db.create("someone-else", DAY, ActivityDraft("Nap", "sleep", 20)))

        assert [a.name for a in db.get_day_activities(USER_ID, DAY)] == ["Read"]
        assert db.get_activity_count(USER_ID) == 2
        assert db.get_activity_count() == 3

    def test_activities_in_creation_order(self, db):
        for name in ["First", "Second", "Third"]:
            run(db.create(USER_ID, DAY, ActivityDraft(name, "work", 10)))

        assert [a.name for a in db.get_day_activities(USER_ID, DAY)] == ["First", "Second", "Third"]

    def test_update(self, db):
        activity_id = run(db.create(USER_ID, DAY, ActivityDraft("Read", "study", 45)))

        run(db.update(USER_ID, DAY, activity_id, ActivityDraft("Read more", "study", 90)))

        activity = db.get_day_activities(USER_ID, DAY)[0]
        assert (activity.name, activity.duration) == ("Read more", 90)
        assert activity.updated_at is not None

    def test_update_missing_raises(self, db):
        with pytest.raises(GatewayError):
            run(db.update(USER_ID, DAY, "missing", ActivityDraft("Read", "study", 45)))

    def test_delete(self, db):
        activity_id = run(db.create(USER_ID, DAY, ActivityDraft("Read", "study", 45)))

        run(db.delete(USER_ID, DAY, activity_id))
        run(db.delete(USER_ID, DAY, activity_id))  # second delete is a no-op

        assert db.get_day_activities(USER_ID, DAY) == []

    def test_subscribe_reports_load_failure(self, db):
        on_snapshot = Mock()
        on_error = Mock()

        with patch.object(db, "get_day_activities", side_effect=sqlite3.OperationalError("disk I/O error")):
            db.subscribe(USER_ID, DAY, on_snapshot, on_error)

        on_snapshot.assert_not_called()
        on_error.assert_called_once()
        assert isinstance(on_error.call_args[0][0], GatewayError)

    def test_write_failure_wrapped(self, db):
        with patch("daytracker.api.database.sqlite3.connect", side_effect=sqlite3.OperationalError("locked")):
            with pytest.raises(GatewayError, match="locked"):
                run(db.create(USER_ID, DAY, ActivityDraft("Read", "study", 45)))

    def test_subscribe_delivers_initial_and_later_snapshots(self, db):
        run(db.create(USER_ID, DAY, ActivityDraft("Read", "study", 45)))
        snapshots = []
        errors = []

        unsubscribe = db.subscribe(USER_ID, DAY, snapshots.append, errors.append)
        run(db.create(USER_ID, DAY, ActivityDraft("Run", "exercise", 30)))
        unsubscribe()
        run(db.create(USER_ID, DAY, ActivityDraft("Nap", "sleep", 20)))

        assert [len(s) for s in snapshots] == [1, 2]
        assert errors == []


@pytest.mark.integration
class TestLedgerOnSQLite:
    """Ledger end to end with persistent storage."""

    def test_budget_enforced_across_sessions(self, db, auth):
        first = ActivityLedger(db, auth)
        first.select_day(DAY)
        assert run(first.add_activity("Sleep", "sleep", 1000)).success
        first.close()

        second = ActivityLedger(db, auth)
        second.select_day(DAY)

        assert second.total_minutes() == 1000
        result = run(second.add_activity("Work", "work", 441))
        assert result.kind == "budget_exceeded"
        assert result.error.remaining_minutes == 440
        second.close()

    def test_two_ledgers_see_each_others_writes(self, db, auth):
        writer = ActivityLedger(db, auth)
        reader = ActivityLedger(db, auth)
        writer.select_day(DAY)
        reader.select_day(DAY)

        run(writer.add_activity("Run", "exercise", 30))

        assert reader.total_minutes() == 30
        writer.close()
        reader.close()
