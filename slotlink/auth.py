from typing import Any

from fastapi import Depends, Path, Request
from fastapi.openapi.models import HTTPBase
from fastapi.security.base import SecurityBase
from pydantic import ValidationError

from slotlink.exceptions.auth import InvalidTokenError, PermissionDeniedError
from slotlink.schemas.user import User, UserAccessToken
from slotlink.utils.jwt import decode_jwt


def get_token(request: Request) -> str:
    authorization: str = request.headers.get("Authorization", "")
    return authorization.removeprefix("Bearer ").removeprefix("bearer ")


class HTTPAuth(SecurityBase):
    def __init__(self) -> None:
        self.model = HTTPBase(scheme="bearer")
        self.scheme_name = self.__class__.__name__

    async def __call__(self, request: Request) -> Any:
        raise NotImplementedError


class JWTAuth(HTTPAuth):
    async def __call__(self, request: Request) -> dict[str, Any] | None:
        if not (token := get_token(request)):
            return None
        return decode_jwt(token, ["uid", "rt", "data"])


class UserAuth(JWTAuth):
    async def __call__(self, request: Request) -> User:
        if (data := await super().__call__(request)) is None:
            raise InvalidTokenError

        try:
            token = UserAccessToken.model_validate(data)
        except ValidationError:
            raise InvalidTokenError
        if await token.is_revoked():
            raise InvalidTokenError

        return token.to_user()


user_auth = Depends(UserAuth())


async def _self_or_admin(user_id: str = Path(), user: User = user_auth) -> str:
    if user_id == "me":
        return user.id
    if user_id != user.id and not user.admin:
        raise PermissionDeniedError
    return user_id


def get_owner_id() -> Any:
    """
    Resolve the ``user_id`` path parameter of an owner route.

    The caller must either be the user identified by ``user_id`` or an admin.
    ``me`` is accepted as an alias for the caller's own id.
    """

    return Depends(_self_or_admin)
