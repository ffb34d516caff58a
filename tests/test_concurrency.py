# tests/test_concurrency.py
import asyncio
import httpx


async def _create_task(app, i):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        return await ac.post("/body", data={"name": f"Lotion {i}", "price": str(10 + i)})


async def _create_all(app, n):
    return await asyncio.gather(*(_create_task(app, i) for i in range(n)))


def test_concurrent_creates_are_all_persisted(app, client):
    results = asyncio.run(_create_all(app, 20))
    assert all(r.status_code == 201 for r in results)

    created = {r.json()["id"] for r in results}
    stored = {p["id"] for p in client.get("/body").json()}
    assert created == stored
