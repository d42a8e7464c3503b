from __future__ import annotations

from typing import Any
from uuid import uuid4

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from slotlink.database import Base, db
from slotlink.logger import get_logger
from slotlink.settings import settings


logger = get_logger(__name__)


class BookingLink(Base):
    """The public link through which visitors reach all slots of one owner."""

    __tablename__ = "slotlink_booking_links"

    owner_id: Mapped[str] = mapped_column(String(36), primary_key=True, unique=True)
    link: Mapped[str] = mapped_column(String(36), unique=True, index=True)

    @property
    def url(self) -> str:
        return f"{settings.public_base_url.rstrip('/')}/booking/{self.link}"

    @property
    def serialize(self) -> dict[str, Any]:
        return {"link": self.link, "url": self.url}

    @classmethod
    async def get(cls, link: str) -> BookingLink | None:
        return await db.get(cls, link=link)

    @classmethod
    async def get_or_create(cls, owner_id: str) -> BookingLink:
        if booking_link := await db.get(cls, owner_id=owner_id):
            return booking_link

        booking_link = await db.add(cls(owner_id=owner_id, link=str(uuid4())))
        await db.flush()
        logger.info("Created booking link %s for owner %s", booking_link.link, owner_id)
        return booking_link
