"""Endpoints for owners to manage their availability slots."""

from typing import Any

from fastapi import APIRouter, Body

from slotlink import models
from slotlink.auth import get_owner_id
from slotlink.database import db
from slotlink.exceptions.auth import admin_responses
from slotlink.exceptions.slots import (
    DuplicateSlotError,
    InvalidTimeRangeError,
    SlotBookedError,
    SlotInPastError,
    SlotNotFoundError,
    TooManySlotsError,
)
from slotlink.logger import get_logger
from slotlink.schemas.slots import BookingLink, CreateSlot, OwnerSlot, Slot
from slotlink.settings import settings


router = APIRouter()

logger = get_logger(__name__)


@router.get("/slots/{user_id}/link", responses=admin_responses(BookingLink))
async def get_booking_link(user_id: str = get_owner_id()) -> Any:
    """
    Return the booking link of the user.

    The link is created the first time it is requested.

    *Requirements:* **SELF** or **ADMIN**
    """

    return (await models.BookingLink.get_or_create(user_id)).serialize


@router.get("/slots/{user_id}", responses=admin_responses(list[OwnerSlot]))
async def get_slots(user_id: str = get_owner_id()) -> Any:
    """
    Return all slots of the user, including past and booked ones.

    *Requirements:* **SELF** or **ADMIN**
    """

    booking_link = await models.BookingLink.get_or_create(user_id)
    booked = {(b.date, b.time_range) for b in await models.Booking.list_for(booking_link.link)}
    return [
        OwnerSlot(**slot.serialize, booked=(slot.date, slot.time_range) in booked)
        for slot in await models.Slot.list_by_owner(user_id)
    ]


@router.post(
    "/slots/{user_id}",
    responses=admin_responses(
        list[Slot], SlotInPastError, InvalidTimeRangeError, TooManySlotsError, DuplicateSlotError
    ),
)
async def add_slots(slots: list[CreateSlot] = Body(embed=True), user_id: str = get_owner_id()) -> Any:
    """
    Add slots for the user and publish them on the user's booking link.

    Slots are created in the given order. If one of them is rejected, none of them are created.

    *Requirements:* **SELF** or **ADMIN**
    """

    if len(slots) > settings.max_slots_per_request:
        raise TooManySlotsError

    booking_link = await models.BookingLink.get_or_create(user_id)
    return [
        (await models.Slot.create(user_id, booking_link.link, slot.date, slot.start, slot.end)).serialize
        for slot in slots
    ]


@router.delete(
    "/slots/{user_id}/{slot_id}", responses=admin_responses(bool, SlotNotFoundError, SlotBookedError)
)
async def delete_slot(slot_id: str, user_id: str = get_owner_id()) -> Any:
    """
    Delete a slot of the user.

    Booked slots cannot be deleted.

    *Requirements:* **SELF** or **ADMIN**
    """

    slot = await db.get(models.Slot, owner_id=user_id, id=slot_id)
    if not slot:
        raise SlotNotFoundError

    if slot.time_range in {b.time_range for b in await models.Booking.list_for(slot.booking_link, slot.date)}:
        raise SlotBookedError

    await db.delete(slot)
    logger.info("Deleted slot %s of owner %s", slot.id, user_id)

    return True
