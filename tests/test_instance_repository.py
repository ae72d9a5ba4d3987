"""Tests for InstanceRepository and the storage-level uniqueness guarantee."""

import pytest
from datetime import date, timedelta
from sqlalchemy.exc import IntegrityError

from sherpa.models.instance import CompletionState
from sherpa.models.item_factory import create_pending_instance
from sherpa.recurrence.materialize import materialize_schedule


@pytest.fixture
def scheduled_habit(db_session, item_repo, daily_habit, anchor_day):
    item_repo.create(daily_habit)
    materialize_schedule(db_session, anchor_day, anchor_day + timedelta(days=2))
    return daily_habit


class TestUpdateStatus:
    def test_complete_sets_completed_at(self, instance_repo, scheduled_habit):
        instance = instance_repo.fetch_instances(scheduled_habit.id)[0]
        updated = instance_repo.update_status(instance.id, CompletionState.COMPLETED)
        assert updated.status == CompletionState.COMPLETED
        assert updated.completed_at is not None
        assert updated.note is None

    def test_leaving_completed_clears_completed_at(self, instance_repo, scheduled_habit):
        instance = instance_repo.fetch_instances(scheduled_habit.id)[0]
        instance_repo.update_status(instance.id, CompletionState.COMPLETED)
        updated = instance_repo.update_status(instance.id, CompletionState.PENDING)
        assert updated.completed_at is None

    def test_note_kept_only_for_skipped_with_note(self, instance_repo, scheduled_habit):
        instance = instance_repo.fetch_instances(scheduled_habit.id)[0]
        updated = instance_repo.update_status(instance.id, CompletionState.SKIPPED_WITH_NOTE, "travelling")
        assert updated.note == "travelling"
        assert updated.completed_at is None

        updated = instance_repo.update_status(instance.id, CompletionState.SKIPPED, "ignored")
        assert updated.note is None

    def test_unknown_instance_raises(self, instance_repo):
        with pytest.raises(ValueError, match="not found"):
            instance_repo.update_status("missing-id", CompletionState.COMPLETED)


class TestQueries:
    def test_fetch_instances_by_range(self, instance_repo, scheduled_habit, anchor_day):
        in_range = instance_repo.fetch_instances(scheduled_habit.id, anchor_day + timedelta(days=1), anchor_day + timedelta(days=5))
        assert [i.date for i in in_range] == [anchor_day + timedelta(days=1), anchor_day + timedelta(days=2)]

    def test_fetch_by_items_groups_and_includes_empty(self, instance_repo, scheduled_habit):
        grouped = instance_repo.fetch_by_items([scheduled_habit.id, "no-instances"])
        assert len(grouped[scheduled_habit.id]) == 3
        assert grouped["no-instances"] == []

    def test_add_all_empty_is_noop(self, instance_repo):
        assert instance_repo.add_all([]) == 0


class TestUniqueness:
    def test_duplicate_item_day_rejected_by_store(self, db_session, instance_repo, scheduled_habit, anchor_day):
        """A writer bypassing the materializer still cannot double-insert."""
        duplicate = create_pending_instance(scheduled_habit, anchor_day)
        with pytest.raises(IntegrityError):
            instance_repo.add_all([duplicate])
        # Session was rolled back and remains usable.
        assert len(instance_repo.fetch_instances(scheduled_habit.id)) == 3

    def test_same_day_for_different_items_is_allowed(self, db_session, item_repo, instance_repo, due_task):
        item_repo.create(due_task)
        assert instance_repo.add_all([create_pending_instance(due_task, date(2024, 1, 1))]) == 1


class TestStoredValues:
    def test_mixed_case_and_unknown_status_columns_load(self, db_session, instance_repo, scheduled_habit):
        from sherpa.database.models import InstanceDB

        first, second = instance_repo.fetch_instances(scheduled_habit.id)[:2]
        db_session.query(InstanceDB).filter(InstanceDB.id == first.id).update({"status": "COMPLETED"})
        db_session.query(InstanceDB).filter(InstanceDB.id == second.id).update({"status": "archived"})
        db_session.commit()

        assert instance_repo.get(first.id).status == CompletionState.COMPLETED
        assert instance_repo.get(second.id).status == CompletionState.PENDING
