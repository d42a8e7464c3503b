from __future__ import annotations

import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import CheckConstraint, Date, String, Time, UniqueConstraint
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Mapped, mapped_column

from slotlink.database import Base, db, filter_by
from slotlink.exceptions.slots import DuplicateSlotError, InvalidTimeRangeError, SlotInPastError
from slotlink.logger import get_logger
from slotlink.utils.time_range import TimeRange, check_time_of_day
from slotlink.utils.utc import today


logger = get_logger(__name__)


class Slot(Base):
    __tablename__ = "slotlink_slots"
    __table_args__ = (
        UniqueConstraint("booking_link", "date", "start_time", name="uq_slot_link_date_start"),
        CheckConstraint("end_time > start_time", name="ck_slot_time_range"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, unique=True)
    owner_id: Mapped[str] = mapped_column(String(36), index=True)
    booking_link: Mapped[str] = mapped_column(String(36), index=True)
    date: Mapped[datetime.date] = mapped_column(Date)
    start_time: Mapped[datetime.time] = mapped_column(Time)
    end_time: Mapped[datetime.time] = mapped_column(Time)

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)

    @property
    def serialize(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "link": self.booking_link,
            "date": self.date,
            "start": self.start_time,
            "end": self.end_time,
        }

    @classmethod
    async def create(
        cls, owner_id: str, booking_link: str, date_: datetime.date, start: datetime.time, end: datetime.time
    ) -> Slot:
        if date_ < today():
            raise SlotInPastError
        try:
            check_time_of_day(start)
            check_time_of_day(end)
        except ValueError:
            raise InvalidTimeRangeError
        if end <= start:
            raise InvalidTimeRangeError

        if await db.exists(filter_by(cls, booking_link=booking_link, date=date_, start_time=start)):
            logger.info("Rejected duplicate slot %s %s for link %s", date_, start, booking_link)
            raise DuplicateSlotError

        slot = await db.add(
            cls(
                id=str(uuid4()),
                owner_id=owner_id,
                booking_link=booking_link,
                date=date_,
                start_time=start,
                end_time=end,
            )
        )
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.info("Rejected duplicate slot %s %s for link %s", date_, start, booking_link)
            raise DuplicateSlotError

        logger.info("Created slot %s (%s %s) for link %s", slot.id, date_, slot.time_range, booking_link)
        return slot

    @classmethod
    async def list_upcoming(cls, booking_link: str, as_of: datetime.date) -> list[Slot]:
        return await db.all(
            filter_by(cls, booking_link=booking_link)
            .where(cls.date >= as_of)
            .order_by(cls.date, cls.start_time)
        )

    @classmethod
    async def list_for_date(cls, booking_link: str, date_: datetime.date) -> list[Slot]:
        return await db.all(filter_by(cls, booking_link=booking_link, date=date_).order_by(cls.start_time))

    @classmethod
    async def list_by_owner(cls, owner_id: str) -> list[Slot]:
        return await db.all(filter_by(cls, owner_id=owner_id).order_by(cls.date, cls.start_time))
