from starlette import status

from slotlink.exceptions.api_exception import APIException


class ValidationError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid input"
    description = "The submitted values are invalid."


class SlotInPastError(ValidationError):
    detail = "Slot in the past"
    description = "Slots cannot be created for a date before today."


class InvalidTimeRangeError(ValidationError):
    detail = "Invalid time range"
    description = "The end time must be after the start time."


class TooManySlotsError(ValidationError):
    detail = "Too many slots"
    description = "Too many slots were submitted in a single request."


class DuplicateSlotError(APIException):
    status_code = status.HTTP_409_CONFLICT
    detail = "Slot already exists"
    description = "A slot with the same date and start time already exists."


class SlotNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Slot not found"
    description = "The requested slot does not exist."


class SlotBookedError(APIException):
    status_code = status.HTTP_409_CONFLICT
    detail = "Slot already booked"
    description = "The requested slot is already booked."
