from pydantic import BaseModel

from slotlink.redis import auth_redis


class User(BaseModel):
    id: str
    admin: bool


class UserAccessTokenData(BaseModel):
    admin: bool = False


class UserAccessToken(BaseModel):
    uid: str
    rt: str
    data: UserAccessTokenData

    def to_user(self) -> User:
        return User(id=self.uid, admin=self.data.admin)

    async def is_revoked(self) -> bool:
        return bool(await auth_redis.exists(f"session_logout:{self.rt}"))
