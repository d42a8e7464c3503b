from .booking_links import BookingLink
from .bookings import Booking
from .slots import Slot


__all__ = ["Booking", "BookingLink", "Slot"]
