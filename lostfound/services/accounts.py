import logging
import secrets
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from lostfound.config import Settings
from lostfound.models.user import User, UserRole
from lostfound.utils import permissions
from lostfound.utils.errors import Conflict, Forbidden, NotFound, ValidationError
from lostfound.utils.form_validator import validate_login_form, validate_register_form
from lostfound.utils.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


def _parse_id(user_id) -> Optional[uuid.UUID]:
    if isinstance(user_id, uuid.UUID):
        return user_id
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


def get_user(session: Session, user_id) -> Optional[User]:
    parsed = _parse_id(user_id)
    if parsed is None:
        return None
    return session.get(User, parsed)


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email.strip().lower())).first()


def register_user(session: Session, fields: dict, settings: Optional[Settings] = None) -> User:
    data = validate_register_form(fields)
    email = data.email.lower()

    if settings and settings.admin_email == email:
        raise Conflict("User already exists")

    if get_user_by_email(session, email):
        raise Conflict("User already exists")

    user = User(
        name=data.name,
        email=email,
        password_hash=hash_password(data.password),
        role=UserRole.student,
    )

    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # a concurrent registration took the email between the check and the insert
        session.rollback()
        raise Conflict("User already exists")
    session.refresh(user)

    logger.info("Registered user %s", user.id)
    return user


def _is_bootstrap_admin(settings: Optional[Settings], email: str, password: str) -> bool:
    if not settings or not settings.admin_bootstrap_enabled:
        return False

    return email == settings.admin_email and secrets.compare_digest(
        password.encode("utf-8"), settings.admin_password.encode("utf-8")
    )


def _provision_admin(session: Session, email: str, password: str) -> User:
    admin = get_user_by_email(session, email)

    if not admin:
        admin = User(
            name="Admin",
            email=email,
            password_hash=hash_password(password),
            role=UserRole.admin,
        )
        session.add(admin)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            raise Conflict("User already exists")
        session.refresh(admin)
        logger.info("Provisioned bootstrap admin %s", admin.id)

    elif admin.role != UserRole.admin:
        admin.role = UserRole.admin
        admin.updated_at = datetime.now(timezone.utc)
        session.add(admin)
        session.commit()
        session.refresh(admin)
        logger.warning("Promoted existing user %s to admin via bootstrap credential", admin.id)

    return admin


def authenticate(session: Session, fields: dict, settings: Optional[Settings] = None) -> User:
    data = validate_login_form(fields)
    email = data.email.lower()

    if _is_bootstrap_admin(settings, email, data.password):
        return _provision_admin(session, email, data.password)

    user = get_user_by_email(session, email)

    if not user or not verify_password(data.password, user.password_hash):
        logger.warning("Failed login attempt")
        raise ValidationError("Invalid credentials")

    return user


def list_users(session: Session, actor: User) -> List[User]:
    if not permissions.can_list_users(actor.role):
        raise Forbidden("Access denied. Admin only.")

    return session.exec(select(User).order_by(User.created_at.desc())).all()


def delete_user(session: Session, actor: User, user_id) -> None:
    target_id = _parse_id(user_id) or user_id

    if not permissions.can_delete_user(actor.id, actor.role, target_id):
        if permissions.is_admin(actor.role):
            raise ValidationError("Cannot delete your own account")
        raise Forbidden("Access denied. Admin only.")

    user = get_user(session, target_id)
    if not user:
        raise NotFound("User not found")

    session.delete(user)
    session.commit()

    logger.info("Admin %s deleted user %s", actor.id, user_id)
