"""
Tests for the item lifecycle: create, claim, unclaim, delete, list.
"""

import uuid
from datetime import datetime, timezone

import pytest

from lostfound.models.item import Item, ItemType
from lostfound.services import lost_found
from lostfound.utils.errors import Forbidden, NotFound, ValidationError


def naive(dt):
    return dt.replace(tzinfo=None)


@pytest.fixture
def item(session, student, item_fields):
    return lost_found.create_item(session, student.id, item_fields)


# =============================================================================
# create_item
# =============================================================================


class TestCreateItem:
    def test_starts_unclaimed_with_reporter_snapshot(self, item, student):
        assert item.claimed is False
        assert item.claimed_at is None
        assert item.reported_by == student.id
        assert item.reporter_name == "Alice"
        assert item.type == ItemType.lost

    def test_strips_strings(self, session, student, item_fields):
        item_fields["title"] = "   Keys   "
        item = lost_found.create_item(session, student.id, item_fields)

        assert item.title == "Keys"

    def test_optional_image_url(self, session, student, item_fields):
        item_fields["imageUrl"] = "https://images.campus.edu/backpack.jpg"
        item = lost_found.create_item(session, student.id, item_fields)

        assert item.image_url == "https://images.campus.edu/backpack.jpg"

    def test_image_url_is_stored_as_sent(self, session, student, item_fields):
        item_fields["imageUrl"] = "  https://images.campus.edu  "
        item = lost_found.create_item(session, student.id, item_fields)

        assert item.image_url == "https://images.campus.edu"

    @pytest.mark.parametrize("value", ["2025-04-01", "2025-03-14T10:30:00"])
    def test_dates_without_offset_are_utc(self, session, student, item_fields, value):
        item_fields["date"] = value
        item = lost_found.create_item(session, student.id, item_fields)

        assert naive(item.date) == datetime.fromisoformat(value)

    def test_empty_image_url_means_none(self, session, student, item_fields):
        item_fields["imageUrl"] = ""
        item = lost_found.create_item(session, student.id, item_fields)

        assert item.image_url is None

    @pytest.mark.parametrize(
        "field, value",
        [
            ("title", "ab"),
            ("title", "x" * 101),
            ("description", "too short"),
            ("description", "x" * 501),
            ("type", "stolen"),
            ("location", "AB"),
            ("contact", "1234"),
            ("contact", "x" * 51),
            ("date", "yesterday"),
            ("date", None),
            ("imageUrl", "not a url"),
        ],
    )
    def test_rejects_invalid_fields(self, session, student, item_fields, field, value):
        item_fields[field] = value

        with pytest.raises(ValidationError):
            lost_found.create_item(session, student.id, item_fields)

    def test_missing_field(self, session, student, item_fields):
        del item_fields["contact"]

        with pytest.raises(ValidationError) as exc_info:
            lost_found.create_item(session, student.id, item_fields)

        assert exc_info.value.errors[0]["field"] == "contact"

    def test_unknown_reporter(self, session, item_fields):
        with pytest.raises(NotFound):
            lost_found.create_item(session, uuid.uuid4(), item_fields)


# =============================================================================
# Claim lifecycle
# =============================================================================


class TestMarkClaimed:
    def test_owner_can_claim(self, session, item, student):
        claimed = lost_found.mark_claimed(session, student.id, student.role, item.id)

        assert claimed.claimed is True
        assert claimed.claimed_at is not None

    def test_admin_can_claim(self, session, item, admin):
        claimed = lost_found.mark_claimed(session, admin.id, admin.role, item.id)

        assert claimed.claimed is True

    def test_non_owner_student_is_forbidden(self, session, item, other_student):
        with pytest.raises(Forbidden):
            lost_found.mark_claimed(session, other_student.id, other_student.role, item.id)

        session.refresh(item)
        assert item.claimed is False

    def test_claiming_twice_refreshes_timestamp(self, session, item, student):
        first = datetime(2025, 3, 15, 9, 0, tzinfo=timezone.utc)
        second = datetime(2025, 3, 16, 17, 30, tzinfo=timezone.utc)

        lost_found.mark_claimed(session, student.id, student.role, item.id, now=first)
        again = lost_found.mark_claimed(session, student.id, student.role, item.id, now=second)

        assert again.claimed is True
        assert naive(again.claimed_at) == naive(second)

    def test_missing_item(self, session, student):
        with pytest.raises(NotFound):
            lost_found.mark_claimed(session, student.id, student.role, uuid.uuid4())

    def test_malformed_id_is_not_found(self, session, student):
        with pytest.raises(NotFound):
            lost_found.mark_claimed(session, student.id, student.role, "abc123")


class TestUnmarkClaimed:
    def test_admin_resets_claim(self, session, item, student, admin):
        lost_found.mark_claimed(session, student.id, student.role, item.id)

        unclaimed = lost_found.unmark_claimed(session, admin.id, admin.role, item.id)

        assert unclaimed.claimed is False
        assert unclaimed.claimed_at is None

    def test_unmarking_unclaimed_item_is_noop(self, session, item, admin):
        unclaimed = lost_found.unmark_claimed(session, admin.id, admin.role, item.id)

        assert unclaimed.claimed is False
        assert unclaimed.claimed_at is None

    def test_owner_cannot_unclaim(self, session, item, student):
        lost_found.mark_claimed(session, student.id, student.role, item.id)

        with pytest.raises(Forbidden):
            lost_found.unmark_claimed(session, student.id, student.role, item.id)

    def test_not_found_before_forbidden(self, session, student):
        with pytest.raises(NotFound):
            lost_found.unmark_claimed(session, student.id, student.role, uuid.uuid4())


class TestDeleteItem:
    def test_admin_deletes(self, session, item, admin):
        item_id = item.id
        lost_found.delete_item(session, admin.id, admin.role, item_id)

        assert session.get(Item, item_id) is None

    def test_owner_cannot_delete(self, session, item, student):
        with pytest.raises(Forbidden):
            lost_found.delete_item(session, student.id, student.role, item.id)

        assert session.get(Item, item.id) is not None

    def test_missing_item_is_not_found_even_for_students(self, session, student):
        with pytest.raises(NotFound):
            lost_found.delete_item(session, student.id, student.role, uuid.uuid4())


# =============================================================================
# list_items
# =============================================================================


def _insert_item(session, reporter, title, item_type, created_at, reporter_name="snapshot"):
    item = Item(
        reported_by=reporter.id,
        reporter_name=reporter_name,
        title=title,
        description="Description long enough",
        type=item_type,
        location="Main hall",
        date=datetime(2025, 1, 1, tzinfo=timezone.utc),
        contact="555-0199",
        created_at=created_at,
    )
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


class TestListItems:
    def test_newest_first(self, session, student):
        _insert_item(session, student, "oldest", ItemType.lost, datetime(2025, 1, 1, tzinfo=timezone.utc))
        _insert_item(session, student, "newest", ItemType.found, datetime(2025, 1, 3, tzinfo=timezone.utc))
        _insert_item(session, student, "middle", ItemType.lost, datetime(2025, 1, 2, tzinfo=timezone.utc))

        titles = [entry["title"] for entry in lost_found.list_items(session)]

        assert titles == ["newest", "middle", "oldest"]

    def test_type_filter(self, session, student):
        _insert_item(session, student, "lost one", ItemType.lost, datetime(2025, 1, 1, tzinfo=timezone.utc))
        _insert_item(session, student, "found one", ItemType.found, datetime(2025, 1, 2, tzinfo=timezone.utc))

        assert [e["title"] for e in lost_found.list_items(session, "lost")] == ["lost one"]
        assert [e["title"] for e in lost_found.list_items(session, "found")] == ["found one"]
        assert len(lost_found.list_items(session, "all")) == 2

    def test_invalid_filter(self, session):
        with pytest.raises(ValidationError):
            lost_found.list_items(session, "stolen")

    def test_includes_reporter(self, session, item, student):
        [entry] = lost_found.list_items(session)

        assert entry["reportedBy"] == {
            "_id": str(student.id),
            "name": "Alice",
            "email": "alice@campus.edu",
        }
        assert entry["claimed"] is False
        assert entry["claimedAt"] is None

    def test_backfills_legacy_reporter_name(self, session, student):
        legacy = _insert_item(
            session, student, "legacy", ItemType.lost, datetime(2025, 1, 1, tzinfo=timezone.utc), reporter_name=None
        )

        [entry] = lost_found.list_items(session)

        assert entry["reporterName"] == "Alice"
        session.refresh(legacy)
        assert legacy.reporter_name == "Alice"

    def test_snapshot_is_not_recomputed(self, session, item, student):
        student.name = "Alice Renamed"
        session.add(student)
        session.commit()

        [entry] = lost_found.list_items(session)

        assert entry["reporterName"] == "Alice"
        assert entry["reportedBy"]["name"] == "Alice Renamed"

    def test_backfill_skips_missing_reporter(self, session, student):
        item = _insert_item(
            session, student, "orphan", ItemType.found, datetime(2025, 1, 1, tzinfo=timezone.utc), reporter_name=None
        )
        item.reported_by = uuid.uuid4()
        session.add(item)
        session.commit()

        [entry] = lost_found.list_items(session)

        assert entry["reporterName"] is None
        assert entry["reportedBy"]["email"] is None
