from starlette import status

from slotlink.exceptions.api_exception import APIException
from slotlink.exceptions.slots import ValidationError


class BookingLinkNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Invalid or expired link"
    description = "The booking link does not exist or has expired."


class SlotUnavailableError(APIException):
    status_code = status.HTTP_409_CONFLICT
    detail = "Slot unavailable"
    description = "The requested time is not available anymore. Please pick another time."


class TimeRangeMissingError(ValidationError):
    detail = "No time selected"
    description = "Please select a time slot to book."
