"""Health probes — every service answers liveness and readiness."""

import pytest
from httpx import ASGITransport, AsyncClient

from bugle.core.domain_types import ServiceName


@pytest.mark.parametrize("service", list(ServiceName))
async def test_liveness_names_service(build_app, service):
    app = build_app(service)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        res = await c.get("/health/")
    assert res.status_code == 200
    assert res.json()["service"] == service.value


async def test_readiness_with_store(content_client):
    res = await content_client.get("/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_readiness_without_store(content_app, content_client):
    del content_app.state.db_manager
    res = await content_client.get("/health/ready")
    assert res.status_code == 503
