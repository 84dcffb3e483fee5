import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlmodel import Session, select

from lostfound.models.item import Item, ItemType
from lostfound.models.user import User
from lostfound.utils import permissions
from lostfound.utils.errors import Forbidden, NotFound, ValidationError
from lostfound.utils.form_validator import validate_create_item_form

logger = logging.getLogger(__name__)

ITEM_FILTERS = ("lost", "found", "all")


def serialize_item(item: Item, reporter: Optional[User] = None) -> dict:
    reported_by = None
    if item.reported_by is not None:
        reported_by = {
            "_id": str(item.reported_by),
            "name": reporter.name if reporter else item.reporter_name,
            "email": reporter.email if reporter else None,
        }

    return {
        "_id": str(item.id),
        "title": item.title,
        "description": item.description,
        "type": ItemType(item.type).value,
        "location": item.location,
        "date": item.date,
        "contact": item.contact,
        "imageUrl": item.image_url or "",
        "reportedBy": reported_by,
        "reporterName": item.reporter_name,
        "claimed": item.claimed,
        "claimedAt": item.claimed_at,
        "createdAt": item.created_at,
        "updatedAt": item.updated_at,
    }


def get_item(session: Session, item_id) -> Item:
    try:
        parsed = item_id if isinstance(item_id, uuid.UUID) else uuid.UUID(str(item_id))
    except ValueError:
        raise NotFound("Item not found")

    item = session.get(Item, parsed)
    if not item:
        raise NotFound("Item not found")

    return item


def create_item(session: Session, reporter_id, fields: dict) -> Item:
    data = validate_create_item_form(fields)

    try:
        reporter = session.get(User, uuid.UUID(str(reporter_id)))
    except ValueError:
        reporter = None

    if not reporter:
        raise NotFound("User not found")

    if not permissions.can_create_item(reporter.role):
        raise Forbidden("Not authorized to report items")

    db_item = Item(
        reported_by=reporter.id,
        reporter_name=reporter.name,
        title=data.title,
        description=data.description,
        type=ItemType(data.type),
        location=data.location,
        date=data.date,
        contact=data.contact,
        image_url=data.image_url,
        claimed=False,
        claimed_at=None,
    )

    session.add(db_item)
    session.commit()
    session.refresh(db_item)

    logger.info("Item %s (%s) created by %s", db_item.id, db_item.type.value, reporter.id)
    return db_item


def mark_claimed(session: Session, actor_id, actor_role, item_id, now: Optional[datetime] = None) -> Item:
    item = get_item(session, item_id)

    if not permissions.can_mark_claimed(actor_id, actor_role, item.reported_by):
        logger.warning("User %s denied marking item %s as claimed", actor_id, item.id)
        raise Forbidden("Not authorized to mark this item as claimed")

    # re-marking a claimed item refreshes the timestamp
    now = now or datetime.now(timezone.utc)
    item.claimed = True
    item.claimed_at = now
    item.updated_at = now

    session.add(item)
    session.commit()
    session.refresh(item)

    logger.info("Item %s marked as claimed by %s", item.id, actor_id)
    return item


def unmark_claimed(session: Session, actor_id, actor_role, item_id) -> Item:
    item = get_item(session, item_id)

    if not permissions.can_unmark_claimed(actor_role):
        logger.warning("User %s denied unmarking item %s", actor_id, item.id)
        raise Forbidden("Access denied. Admin only.")

    item.claimed = False
    item.claimed_at = None
    item.updated_at = datetime.now(timezone.utc)

    session.add(item)
    session.commit()
    session.refresh(item)

    logger.info("Item %s unmarked as claimed by %s", item.id, actor_id)
    return item


def delete_item(session: Session, actor_id, actor_role, item_id) -> None:
    item = get_item(session, item_id)

    if not permissions.can_delete_item(actor_role):
        logger.warning("User %s denied deleting item %s", actor_id, item.id)
        raise Forbidden("Access denied. Admin only.")

    session.delete(item)
    session.commit()

    logger.info("Item %s deleted by %s", item_id, actor_id)


def backfill_reporter_names(session: Session, rows: List[Tuple[Item, Optional[User]]]) -> int:
    """Fill in the reporter name snapshot on rows that predate it.

    The name is looked up once and persisted, later reads use the stored
    copy. Rows whose reporter no longer exists are left as they are.
    Returns the number of rows updated.
    """
    updated = 0

    for item, reporter in rows:
        if item.reporter_name is None and reporter is not None:
            item.reporter_name = reporter.name
            session.add(item)
            updated += 1

    if updated:
        session.commit()
        logger.info("Backfilled reporter name on %d items", updated)

    return updated


def list_items(session: Session, item_type: Optional[str] = "all") -> List[dict]:
    item_type = item_type or "all"

    if item_type not in ITEM_FILTERS:
        raise ValidationError(
            "Validation failed",
            errors=[{"field": "type", "message": 'Type must be one of "lost", "found" or "all"'}],
        )

    query = (
        select(Item, User)
        .join(User, User.id == Item.reported_by, isouter=True)
        .order_by(Item.created_at.desc())
    )

    if item_type != "all":
        query = query.where(Item.type == ItemType(item_type))

    rows = session.exec(query).all()

    backfill_reporter_names(session, rows)

    return [serialize_item(item, reporter) for item, reporter in rows]
