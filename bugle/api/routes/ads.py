"""Ad Telemetry Routes — insert-only impression/interaction logging."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from bugle.core.domain_types import AdEventKind
from bugle.infrastructure.database import get_db
from bugle.schemas.ad_event import AdEventCreate, AdEventLogged
from bugle.services.ad_events import record_ad_event

router = APIRouter(prefix="/ads", tags=["ads"])


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


@router.post(
    "/impression", response_model=AdEventLogged, status_code=status.HTTP_201_CREATED,
)
async def log_impression(
    body: AdEventCreate, request: Request, db: AsyncSession = Depends(get_db),
):
    await record_ad_event(db, AdEventKind.IMPRESSION, body, _client_ip(request))
    return AdEventLogged(message="Impression logged successfully")


@router.post(
    "/interaction", response_model=AdEventLogged, status_code=status.HTTP_201_CREATED,
)
async def log_interaction(
    body: AdEventCreate, request: Request, db: AsyncSession = Depends(get_db),
):
    await record_ad_event(db, AdEventKind.INTERACTION, body, _client_ip(request))
    return AdEventLogged(message="Interaction logged successfully")
