"""Ad Events — insert-only telemetry sink.

Invariants:
    - Rows are only ever inserted
    - Interactions record "unknown" for a missing browser/os; impressions record NULL
"""

from sqlalchemy.ext.asyncio import AsyncSession

from bugle.core.domain_types import AdEventKind
from bugle.models.ad_event import AdEvent
from bugle.schemas.ad_event import AdEventCreate


async def record_ad_event(
    db: AsyncSession, kind: AdEventKind, payload: AdEventCreate, client_ip: str | None,
) -> AdEvent:
    browser, os_name = payload.browser, payload.os
    if kind == AdEventKind.INTERACTION:
        browser = browser or "unknown"
        os_name = os_name or "unknown"
    event = AdEvent(
        user_id=payload.user_id or None,
        kind=kind.value,
        client_ip=client_ip,
        browser=browser,
        os=os_name,
    )
    db.add(event)
    await db.commit()
    return event
