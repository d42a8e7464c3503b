from __future__ import annotations

import datetime
from itertools import groupby
from typing import Any, Collection, Iterable
from uuid import uuid4

from sqlalchemy import Date, String, Time, UniqueConstraint
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Mapped, mapped_column

from slotlink.database import Base, db, filter_by
from slotlink.database.database import UTCDateTime
from slotlink.exceptions.bookings import SlotUnavailableError, TimeRangeMissingError
from slotlink.logger import get_logger
from slotlink.models.slots import Slot
from slotlink.utils.time_range import TimeRange
from slotlink.utils.utc import utcnow


logger = get_logger(__name__)


class Booking(Base):
    """
    A visitor's claim on one time range of a booking link.

    Bookings reference slots by value (link, date and time range) and are never changed or removed.
    """

    __tablename__ = "slotlink_bookings"
    __table_args__ = (
        UniqueConstraint("booking_link", "date", "start_time", "end_time", name="uq_booking_link_date_range"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, unique=True)
    booking_link: Mapped[str] = mapped_column(String(36), index=True)
    date: Mapped[datetime.date] = mapped_column(Date)
    start_time: Mapped[datetime.time] = mapped_column(Time)
    end_time: Mapped[datetime.time] = mapped_column(Time)
    created_at: Mapped[datetime.datetime] = mapped_column(UTCDateTime)

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)

    @property
    def serialize(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "start": self.start_time,
            "end": self.end_time,
            "time_range": str(self.time_range),
        }

    @classmethod
    async def list_for(cls, booking_link: str, date_: datetime.date | None = None) -> list[Booking]:
        query = filter_by(cls, booking_link=booking_link)
        if date_ is not None:
            query = query.filter_by(date=date_)
        return await db.all(query.order_by(cls.date, cls.start_time))

    @classmethod
    async def book(
        cls,
        booking_link: str,
        date_: datetime.date,
        time_range: TimeRange | None,
        available: Collection[TimeRange],
    ) -> Booking:
        """
        Book a time range that the caller has seen in ``available``.

        Availability is checked again against the database before the booking is inserted, and the
        unique constraint on (link, date, time range) rejects whichever concurrent booking commits last.
        """

        if time_range is None:
            raise TimeRangeMissingError
        if time_range not in available:
            raise SlotUnavailableError

        if time_range not in await get_available_times(booking_link, date_):
            logger.warning(
                "Booking %s on %s for link %s lost against another booking", time_range, date_, booking_link
            )
            raise SlotUnavailableError

        booking = await db.add(
            cls(
                id=str(uuid4()),
                booking_link=booking_link,
                date=date_,
                start_time=time_range.start,
                end_time=time_range.end,
                created_at=utcnow(),
            )
        )
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.warning(
                "Booking %s on %s for link %s lost against another booking", time_range, date_, booking_link
            )
            raise SlotUnavailableError

        logger.info("Booked %s on %s for link %s", time_range, date_, booking_link)
        return booking


def available_times_for(
    booking_link: str, date_: datetime.date, slots: Iterable[Slot], bookings: Iterable[Booking]
) -> list[TimeRange]:
    """Return the time ranges of the link's slots on a date that are not booked yet, by start time."""

    booked = {b.time_range for b in bookings if b.booking_link == booking_link and b.date == date_}
    offered = {s.time_range for s in slots if s.booking_link == booking_link and s.date == date_}
    return sorted(offered - booked)


async def get_available_times(booking_link: str, date_: datetime.date) -> list[TimeRange]:
    return available_times_for(
        booking_link,
        date_,
        await Slot.list_for_date(booking_link, date_),
        await Booking.list_for(booking_link, date_),
    )


async def get_available_dates(booking_link: str, as_of: datetime.date) -> list[datetime.date]:
    """Return the dates from ``as_of`` on that still have at least one available time range."""

    slots = await Slot.list_upcoming(booking_link, as_of)
    bookings = await db.all(filter_by(Booking, booking_link=booking_link).where(Booking.date >= as_of))
    return [
        date_
        for date_, group in groupby(slots, key=lambda s: s.date)
        if available_times_for(booking_link, date_, group, bookings)
    ]
