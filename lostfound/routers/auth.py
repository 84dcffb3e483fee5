from fastapi import APIRouter, Depends
from sqlmodel import Session

from lostfound.config import Settings, get_settings
from lostfound.db.db import get_session
from lostfound.models.user import User
from lostfound.services import accounts
from lostfound.utils.auth_helper import get_current_user, require_admin
from lostfound.utils.sessions import SessionIssuer, get_session_issuer

router = APIRouter()


@router.post("/register", status_code=201)
def register(
    payload: dict,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    user = accounts.register_user(session, payload, settings)

    return {
        "token": issuer.issue(user.id),
        "user": user.public_dict(),
    }


@router.post("/login")
def login(
    payload: dict,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    user = accounts.authenticate(session, payload, settings)

    return {
        "token": issuer.issue(user.id),
        "user": user.public_dict(),
    }


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {"user": current_user.public_dict()}


@router.get("/users")
def get_users(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    users = accounts.list_users(session, admin)

    return [
        {
            **user.public_dict(),
            "createdAt": user.created_at,
            # no login tracking yet, registration time stands in
            "lastLogin": user.created_at,
            "active": True,
        }
        for user in users
    ]


@router.delete("/users/{user_id}")
def delete_user(
    user_id: str,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    accounts.delete_user(session, admin, user_id)

    return {"message": "User deleted successfully"}
