import re
from datetime import datetime, timezone
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field, HttpUrl, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from lostfound.utils.errors import ValidationError


PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")

http_url_adapter = TypeAdapter(HttpUrl)


class ValidatedRegister(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not PASSWORD_PATTERN.match(value):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, and one number"
            )
        return value


class ValidatedLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ValidatedCreateItem(BaseModel):
    title: str = Field(min_length=3, max_length=100)
    description: str = Field(min_length=10, max_length=500)
    type: Literal["lost", "found"]
    location: str = Field(min_length=3, max_length=100)
    date: datetime
    contact: str = Field(min_length=5, max_length=50)
    image_url: Optional[str] = None  # kept as sent, HttpUrl would normalize it

    @field_validator("image_url")
    @classmethod
    def image_url_is_http(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            http_url_adapter.validate_python(value)
        except PydanticValidationError:
            raise ValueError("Image URL must be a valid URL")
        return value


def _clean(value):
    return value.strip() if isinstance(value, str) else value


def _field_errors(e: PydanticValidationError) -> list:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
        }
        for err in e.errors()
    ]


def _as_utc(value: datetime) -> datetime:
    # offset-less dates are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_date(value):
    if isinstance(value, datetime):
        return _as_utc(value)

    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            "Validation failed",
            errors=[{"field": "date", "message": "Date is required"}],
        )

    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(
            "Validation failed",
            errors=[{"field": "date", "message": "Date must be a valid ISO 8601 date"}],
        )

    return _as_utc(parsed)


def validate_register_form(fields: dict) -> ValidatedRegister:
    try:
        return ValidatedRegister(
            name=_clean(fields.get("name")),
            email=_clean(fields.get("email")),
            password=fields.get("password"),
        )
    except PydanticValidationError as e:
        raise ValidationError("Validation failed", errors=_field_errors(e))


def validate_login_form(fields: dict) -> ValidatedLogin:
    try:
        return ValidatedLogin(
            email=_clean(fields.get("email")),
            password=fields.get("password"),
        )
    except PydanticValidationError as e:
        raise ValidationError("Validation failed", errors=_field_errors(e))


def validate_create_item_form(fields: dict) -> ValidatedCreateItem:
    parsed_date = _parse_date(fields.get("date"))

    # an empty image URL means "no image"
    image_url = _clean(fields.get("imageUrl")) or None

    try:
        return ValidatedCreateItem(
            title=_clean(fields.get("title")),
            description=_clean(fields.get("description")),
            type=fields.get("type"),
            location=_clean(fields.get("location")),
            date=parsed_date,
            contact=_clean(fields.get("contact")),
            image_url=image_url,
        )
    except PydanticValidationError as e:
        raise ValidationError("Validation failed", errors=_field_errors(e))
