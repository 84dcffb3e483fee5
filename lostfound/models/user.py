import uuid
from enum import Enum
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class UserRole(str, Enum):
    student = "student"
    admin = "admin"


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    name: str
    email: str = Field(index=True, unique=True)  # always stored lower-cased
    password_hash: str

    role: UserRole = Field(default=UserRole.student)

    def public_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
        }
