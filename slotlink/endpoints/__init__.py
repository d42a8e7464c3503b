from fastapi import APIRouter

from . import booking, slots


ROUTERS: list[APIRouter] = [slots.router, booking.router]
