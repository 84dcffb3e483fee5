import uuid
from enum import Enum
from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone


class ItemType(str, Enum):
    lost = "lost"
    found = "found"


class Item(SQLModel, table=True):
    __tablename__ = "items"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Reporter info
    reported_by: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="users.id",
        index=True,
        ondelete="SET NULL",
    )
    reporter_name: Optional[str] = None  # snapshot taken at creation, NULL on legacy rows

    # Item fields
    title: str
    description: str
    type: ItemType = Field(index=True)
    location: str
    date: datetime
    contact: str
    image_url: Optional[str] = None

    # Claim state: claimed is True exactly when claimed_at is set
    claimed: bool = Field(default=False)
    claimed_at: Optional[datetime] = None
