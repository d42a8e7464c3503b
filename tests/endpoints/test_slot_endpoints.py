from datetime import timedelta
from typing import Callable
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from slotlink.redis import auth_redis
from slotlink.settings import settings
from slotlink.utils.utc import today


def _slot(days: int, start: str, end: str) -> dict[str, str]:
    return {"date": (today() + timedelta(days=days)).isoformat(), "start": start, "end": end}


async def test__get_booking_link(client: AsyncClient, auth_headers: Callable[..., dict[str, str]]) -> None:
    response = await client.get("/slots/owner/link", headers=auth_headers("owner"))
    assert response.status_code == 200
    link = response.json()

    assert link["url"] == f"https://book.example.com/booking/{link['link']}"
    assert (await client.get("/slots/me/link", headers=auth_headers("owner"))).json() == link
    assert (await client.get("/slots/other/link", headers=auth_headers("other"))).json() != link


async def test__requires_token(client: AsyncClient) -> None:
    response = await client.get("/slots/owner")
    assert response.status_code == 401


async def test__requires_self_or_admin(client: AsyncClient, auth_headers: Callable[..., dict[str, str]]) -> None:
    assert (await client.get("/slots/owner", headers=auth_headers("intruder"))).status_code == 403
    assert (await client.get("/slots/owner", headers=auth_headers("admin", admin=True))).status_code == 200


async def test__add_slots(client: AsyncClient, auth_headers: Callable[..., dict[str, str]]) -> None:
    headers = auth_headers("owner")
    link = (await client.get("/slots/owner/link", headers=headers)).json()["link"]

    response = await client.post(
        "/slots/owner", json={"slots": [_slot(1, "09:00", "09:30"), _slot(0, "14:00", "15:00")]}, headers=headers
    )

    assert response.status_code == 200
    created = response.json()
    assert [s["link"] for s in created] == [link, link]
    assert [s["start"] for s in created] == ["09:00:00", "14:00:00"]

    slots = (await client.get("/slots/owner", headers=headers)).json()
    assert [(s["date"], s["start"], s["booked"]) for s in slots] == [
        (today().isoformat(), "14:00:00", False),
        ((today() + timedelta(days=1)).isoformat(), "09:00:00", False),
    ]


async def test__add_slots__in_the_past(client: AsyncClient, auth_headers: Callable[..., dict[str, str]]) -> None:
    response = await client.post(
        "/slots/owner", json={"slots": [_slot(-1, "09:00", "09:30")]}, headers=auth_headers("owner")
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Slot in the past"}


async def test__add_slots__invalid_range(client: AsyncClient, auth_headers: Callable[..., dict[str, str]]) -> None:
    response = await client.post(
        "/slots/owner", json={"slots": [_slot(1, "09:00", "09:00")]}, headers=auth_headers("owner")
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid time range"}


@pytest.mark.parametrize("start,end", [("09:00:30", "09:30"), ("09:00", "09:30:15"), ("09:00:00Z", "10:00")])
async def test__add_slots__not_whole_minutes_or_timezone_aware(
    client: AsyncClient, auth_headers: Callable[..., dict[str, str]], start: str, end: str
) -> None:
    headers = auth_headers("owner")
    response = await client.post("/slots/owner", json={"slots": [_slot(1, start, end)]}, headers=headers)

    assert response.status_code == 422
    assert (await client.get("/slots/owner", headers=headers)).json() == []


async def test__added_slot_is_bookable_by_its_time_range(
    client: AsyncClient, auth_headers: Callable[..., dict[str, str]]
) -> None:
    headers = auth_headers("owner")
    response = await client.post("/slots/owner", json={"slots": [_slot(1, "09:00:00", "09:30")]}, headers=headers)
    assert response.status_code == 200
    link = response.json()[0]["link"]
    day = (today() + timedelta(days=1)).isoformat()

    times = (await client.get(f"/booking/{link}/{day}")).json()
    assert [t["time_range"] for t in times] == ["09:00-09:30"]

    response = await client.post(f"/booking/{link}/{day}", json={"time_range": times[0]["time_range"]})
    assert response.status_code == 200


async def test__add_slots__duplicate_aborts_batch(
    client: AsyncClient, auth_headers: Callable[..., dict[str, str]]
) -> None:
    headers = auth_headers("owner")
    await client.post("/slots/owner", json={"slots": [_slot(1, "09:00", "09:30")]}, headers=headers)

    response = await client.post(
        "/slots/owner", json={"slots": [_slot(2, "09:00", "09:30"), _slot(1, "09:00", "10:00")]}, headers=headers
    )

    assert response.status_code == 409
    assert response.json() == {"detail": "Slot already exists"}
    assert len((await client.get("/slots/owner", headers=headers)).json()) == 1


async def test__add_slots__too_many(client: AsyncClient, auth_headers: Callable[..., dict[str, str]]) -> None:
    slots = [_slot(1, f"{h:02}:00", f"{h:02}:30") for h in range(24)] * 3
    assert len(slots) > settings.max_slots_per_request

    response = await client.post("/slots/owner", json={"slots": slots}, headers=auth_headers("owner"))

    assert response.status_code == 400
    assert response.json() == {"detail": "Too many slots"}


async def test__delete_slot(client: AsyncClient, auth_headers: Callable[..., dict[str, str]]) -> None:
    headers = auth_headers("owner")
    slot = (await client.post("/slots/owner", json={"slots": [_slot(1, "09:00", "09:30")]}, headers=headers)).json()[0]

    assert (await client.delete(f"/slots/other/{slot['id']}", headers=auth_headers("other"))).status_code == 404

    response = await client.delete(f"/slots/owner/{slot['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json() is True
    assert (await client.get("/slots/owner", headers=headers)).json() == []
    assert (await client.delete(f"/slots/owner/{slot['id']}", headers=headers)).status_code == 404


async def test__delete_slot__booked(client: AsyncClient, auth_headers: Callable[..., dict[str, str]]) -> None:
    headers = auth_headers("owner")
    slot = (await client.post("/slots/owner", json={"slots": [_slot(1, "09:00", "09:30")]}, headers=headers)).json()[0]
    booked = await client.post(f"/booking/{slot['link']}/{slot['date']}", json={"time_range": "09:00-09:30"})
    assert booked.status_code == 200

    response = await client.delete(f"/slots/owner/{slot['id']}", headers=headers)

    assert response.status_code == 409
    assert response.json() == {"detail": "Slot already booked"}
    assert [s["booked"] for s in (await client.get("/slots/owner", headers=headers)).json()] == [True]


async def test__revoked_session(
    client: AsyncClient, auth_headers: Callable[..., dict[str, str]], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(auth_redis, "exists", AsyncMock(return_value=1))

    response = await client.get("/slots/owner", headers=auth_headers("owner"))

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid token"}
    auth_redis.exists.assert_awaited_once_with("session_logout:rt-owner")


async def test__malformed_token(client: AsyncClient) -> None:
    response = await client.get("/slots/owner", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
