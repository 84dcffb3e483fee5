from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from lostfound.db.db import get_session
from lostfound.models.user import User
from lostfound.services.accounts import get_user
from lostfound.utils import permissions
from lostfound.utils.errors import AuthError, Forbidden
from lostfound.utils.sessions import SessionIssuer, get_session_issuer

# missing credentials are reported as AuthError rather than FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    token: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    session: Session = Depends(get_session),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> User:
    if not token or not token.credentials:
        raise AuthError("Please authenticate. No token provided.")

    user_id = issuer.verify(token.credentials)

    # role always comes from the stored record, never from the token
    user = get_user(session, user_id)
    if not user:
        raise AuthError("Please authenticate. User not found.")

    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not permissions.is_admin(user.role):
        raise Forbidden("Access denied. Admin only.")
    return user
