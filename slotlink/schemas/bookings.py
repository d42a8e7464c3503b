import datetime

from pydantic import BaseModel, Field, field_validator

from slotlink.utils.time_range import TimeRange


class AvailableTime(BaseModel):
    start: datetime.time = Field(description="Start time of the available slot")
    end: datetime.time = Field(description="End time of the available slot")
    time_range: str = Field(description="Key of the time range, used to book it (HH:MM-HH:MM)")

    @classmethod
    def from_time_range(cls, time_range: TimeRange) -> "AvailableTime":
        return cls(start=time_range.start, end=time_range.end, time_range=str(time_range))


class CreateBooking(BaseModel):
    time_range: TimeRange | None = Field(None, description="The time range to book (HH:MM-HH:MM)")

    @field_validator("time_range", mode="before")
    @classmethod
    def parse_time_range(cls, value: object) -> object:
        if isinstance(value, str):
            return TimeRange.parse(value)
        return value


class Booking(BaseModel):
    id: str = Field(description="Booking ID")
    date: datetime.date = Field(description="Date of the booking")
    start: datetime.time = Field(description="Start time of the booking")
    end: datetime.time = Field(description="End time of the booking")
    time_range: str = Field(description="Key of the booked time range (HH:MM-HH:MM)")
    message: str = Field(description="Confirmation message for the visitor")
