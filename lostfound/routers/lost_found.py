from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from lostfound.db.db import get_session
from lostfound.models.user import User
from lostfound.services import lost_found
from lostfound.utils.auth_helper import get_current_user


router = APIRouter()


@router.get("")
def get_all_items(
    type: Optional[str] = Query("all"),
    session: Session = Depends(get_session),
):
    return lost_found.list_items(session, type)


@router.post("", status_code=201)
def add_item(
    payload: dict,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    item = lost_found.create_item(session, current_user.id, payload)

    return lost_found.serialize_item(item, current_user)


@router.post("/{item_id}/mark-claimed")
def mark_claimed(
    item_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    item = lost_found.mark_claimed(session, current_user.id, current_user.role, item_id)

    return {
        "success": True,
        "message": "Item marked as claimed successfully",
        "claimed": True,
        "claimedAt": item.claimed_at,
    }


@router.post("/{item_id}/unmark-claimed")
def unmark_claimed(
    item_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    lost_found.unmark_claimed(session, current_user.id, current_user.role, item_id)

    return {
        "success": True,
        "message": "Item unmarked as claimed successfully",
        "claimed": False,
        "claimedAt": None,
    }


@router.delete("/{item_id}")
def delete_item(
    item_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    lost_found.delete_item(session, current_user.id, current_user.role, item_id)

    return {
        "success": True,
        "message": "Item deleted successfully",
    }
