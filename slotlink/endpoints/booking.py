"""Public endpoints for visitors of a booking link."""

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends

from slotlink import models
from slotlink.exceptions.api_exception import responses
from slotlink.exceptions.bookings import BookingLinkNotFoundError, SlotUnavailableError, TimeRangeMissingError
from slotlink.models.bookings import get_available_dates, get_available_times
from slotlink.schemas.bookings import AvailableTime, Booking, CreateBooking
from slotlink.schemas.slots import UpcomingSlot
from slotlink.utils.utc import today


router = APIRouter()


@Depends
async def get_booking_link(link: str) -> models.BookingLink:
    booking_link = await models.BookingLink.get(link)
    if not booking_link:
        raise BookingLinkNotFoundError

    return booking_link


@router.get("/booking/{link}", responses=responses(list[UpcomingSlot], BookingLinkNotFoundError))
async def list_upcoming_slots(booking_link: models.BookingLink = get_booking_link) -> Any:
    """Return all slots of a booking link from today on, booked or not."""

    return [
        UpcomingSlot(date=slot.date, start=slot.start_time, end=slot.end_time)
        for slot in await models.Slot.list_upcoming(booking_link.link, today())
    ]


@router.get("/booking/{link}/dates", responses=responses(list[date], BookingLinkNotFoundError))
async def list_available_dates(booking_link: models.BookingLink = get_booking_link) -> Any:
    """Return the dates from today on that still have at least one available time."""

    return await get_available_dates(booking_link.link, today())


@router.get("/booking/{link}/{date}", responses=responses(list[AvailableTime], BookingLinkNotFoundError))
async def list_available_times(date: date, booking_link: models.BookingLink = get_booking_link) -> Any:
    """Return the times on a date that can still be booked, ordered by start time."""

    if date < today():
        return []

    return [AvailableTime.from_time_range(t) for t in await get_available_times(booking_link.link, date)]


@router.post(
    "/booking/{link}/{date}",
    responses=responses(Booking, BookingLinkNotFoundError, SlotUnavailableError, TimeRangeMissingError),
)
async def book(data: CreateBooking, date: date, booking_link: models.BookingLink = get_booking_link) -> Any:
    """
    Book one of the available times on a date.

    If the time has been booked by someone else in the meantime, the request fails and the visitor
    should pick another time from a fresh list of available times.
    """

    available = await get_available_times(booking_link.link, date) if date >= today() else []
    booking = await models.Booking.book(booking_link.link, date, data.time_range, available)

    return Booking(**booking.serialize, message=f"Slot booked for {booking.date} at {booking.time_range}")
