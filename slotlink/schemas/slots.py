import datetime

from pydantic import BaseModel, Field, field_validator

from slotlink.utils.time_range import check_time_of_day


class BookingLink(BaseModel):
    link: str = Field(description="Public identifier of the booking link")
    url: str = Field(description="Shareable URL of the booking page")


class Slot(BaseModel):
    id: str = Field(description="Slot ID")
    link: str = Field(description="Booking link the slot is published on")
    date: datetime.date = Field(description="Date of the slot")
    start: datetime.time = Field(description="Start time of the slot")
    end: datetime.time = Field(description="End time of the slot")


class OwnerSlot(Slot):
    booked: bool = Field(description="Whether the slot is booked or not")


class UpcomingSlot(BaseModel):
    date: datetime.date = Field(description="Date of the slot")
    start: datetime.time = Field(description="Start time of the slot")
    end: datetime.time = Field(description="End time of the slot")


class CreateSlot(BaseModel):
    date: datetime.date = Field(description="Date of the slot (must not be in the past)")
    start: datetime.time = Field(description="Start time of the slot")
    end: datetime.time = Field(description="End time of the slot (must be after the start time)")

    @field_validator("start", "end")
    @classmethod
    def whole_minute(cls, value: datetime.time) -> datetime.time:
        return check_time_of_day(value)
