from redis.asyncio import Redis

from slotlink.settings import settings


def get_redis(url: str) -> Redis:
    return Redis.from_url(url, encoding="utf-8", decode_responses=True)


auth_redis: Redis = get_redis(settings.auth_redis_url)
