from datetime import timedelta
from typing import Any, cast

import jwt
from jwt import InvalidTokenError

from slotlink.settings import settings
from slotlink.utils.utc import utcnow


def encode_jwt(data: dict[str, Any], ttl: timedelta | None = None) -> str:
    if ttl is not None:
        data = data | {"exp": utcnow() + ttl}
    return jwt.encode(data, settings.jwt_secret, "HS256")


def decode_jwt(token: str, require: list[str] | None = None) -> dict[str, Any] | None:
    try:
        return cast(
            dict[str, Any],
            jwt.decode(token, settings.jwt_secret, ["HS256"], options={"require": [*(require or [])]}),
        )
    except InvalidTokenError:
        return None
