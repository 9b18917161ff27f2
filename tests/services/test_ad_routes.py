"""Ad service — insert-only impression/interaction telemetry.

Invariants:
    - Both endpoints are unauthenticated and answer 201
    - Client IP is recorded from the connection
    - Interactions record "unknown" for a missing browser/os, impressions keep NULL
"""

from sqlalchemy import select

from bugle.models.ad_event import AdEvent


async def _events(session_factory) -> list[AdEvent]:
    async with session_factory() as session:
        return list((await session.execute(select(AdEvent))).scalars().all())


async def test_impression_logged(ads_client, test_session_factory):
    res = await ads_client.post(
        "/ads/impression", json={"userId": "u1", "browser": "Firefox", "os": "Linux"},
    )

    assert res.status_code == 201
    assert res.json() == {"message": "Impression logged successfully"}
    [event] = await _events(test_session_factory)
    assert event.kind == "impression"
    assert event.user_id == "u1"
    assert (event.browser, event.os) == ("Firefox", "Linux")
    assert event.client_ip is not None


async def test_impression_without_details_keeps_nulls(ads_client, test_session_factory):
    await ads_client.post("/ads/impression", json={})

    [event] = await _events(test_session_factory)
    assert event.user_id is None
    assert event.browser is None
    assert event.os is None


async def test_interaction_defaults_to_unknown(ads_client, test_session_factory):
    res = await ads_client.post("/ads/interaction", json={"userId": "u1"})

    assert res.status_code == 201
    assert res.json() == {"message": "Interaction logged successfully"}
    [event] = await _events(test_session_factory)
    assert event.kind == "interaction"
    assert (event.browser, event.os) == ("unknown", "unknown")


async def test_events_are_appended(ads_client, test_session_factory):
    for _ in range(3):
        await ads_client.post("/ads/impression", json={})
    await ads_client.post("/ads/interaction", json={})

    kinds = sorted(e.kind for e in await _events(test_session_factory))
    assert kinds == ["impression", "impression", "impression", "interaction"]
