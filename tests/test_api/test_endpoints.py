"""
API Endpoint Tests — every route through the ASGI app.

Tests:
- Health: GET /health
- Catalog: GET /api/v1/stadiums, /tiers
- Session: GET /api/v1/session, POST /session/stadium, /session/reset
- Quotes & advice: POST /api/v1/quotes, /recommendation
- Policy: POST /api/v1/policy, /policy/settle
- Error envelope: code, retryable flag, request_id
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from pitchcover.api.app import app
from pitchcover.api.deps import get_session


@pytest.fixture
def make_client(session_factory):
    """Factory: async client bound to a fresh match-day session."""

    def _make(**session_kwargs) -> AsyncClient:
        session = session_factory(**session_kwargs)
        app.dependency_overrides[get_session] = lambda: session
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    yield _make
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(make_client):
    async with make_client(rolls=[0.0, 0.0]) as c:
        yield c


# ── Health & Catalog ──────────────────────────────────────────────────


class TestCatalog:
    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert "X-Request-ID" in resp.headers

    @pytest.mark.asyncio
    async def test_stadiums(self, client):
        resp = await client.get("/api/v1/stadiums")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 7
        assert {s["id"] for s in data} == {"blr", "mum", "kol", "ahm", "che", "del", "dha"}

    @pytest.mark.asyncio
    async def test_tiers(self, client):
        resp = await client.get("/api/v1/tiers")
        assert resp.status_code == 200
        tiers = {t["id"]: t for t in resp.json()}
        assert set(tiers) == {"basic", "standard", "premium", "group", "platinum"}
        assert tiers["standard"]["recommended"]
        assert tiers["platinum"]["settlement_mode"] == "flat_multiplier"
        refund = tiers["basic"]["components"][0]
        assert refund["triggers"] == ["abandoned"]


# ── Session Flow ──────────────────────────────────────────────────────


class TestSessionFlow:
    @pytest.mark.asyncio
    async def test_full_match_day(self, client):
        resp = await client.post("/api/v1/session/stadium", json={"stadium_id": "blr"})
        assert resp.status_code == 200
        assert resp.json()["rain_risk"] == 50

        resp = await client.post("/api/v1/quotes", json={"ticket_value": 2500})
        assert resp.status_code == 200
        body = resp.json()
        assert body["rain_risk"] == 50
        standard = next(q for q in body["quotes"] if q["tier_id"] == "standard")
        assert standard["premium"] == 199
        assert standard["coverage"]["abandoned"] == 3250

        resp = await client.post("/api/v1/recommendation", json={"ticket_value": 2500})
        assert resp.status_code == 200
        assert resp.json()["tier_id"] == "standard"
        assert resp.json()["recommendation"] == "recommended"

        resp = await client.post("/api/v1/policy", json={"tier_id": "standard", "ticket_value": 2500})
        assert resp.status_code == 200
        assert resp.json()["premium"] == 199

        resp = await client.post("/api/v1/policy/settle")
        assert resp.status_code == 200
        settlement = resp.json()
        assert settlement["abandoned"]
        assert settlement["payout"] == 3250
        assert settlement["scenario"] == "abandoned"

        resp = await client.get("/api/v1/session")
        state = resp.json()
        assert state["wallet"] == 25000 - 199 + 3250
        assert state["total_profit_loss"] == 3051
        assert state["policy"] is None
        assert state["achievements"] == ["first_policy"]

    @pytest.mark.asyncio
    async def test_reset(self, client):
        await client.post("/api/v1/session/stadium", json={"stadium_id": "blr"})
        await client.post("/api/v1/policy", json={"tier_id": "basic", "ticket_value": 2500})
        resp = await client.post("/api/v1/session/reset")
        assert resp.status_code == 200
        assert resp.json()["policy"] is None
        assert resp.json()["wallet"] == 25000 - 99


    @pytest.mark.asyncio
    @pytest.mark.parametrize("ticket_value", [1, 2])
    async def test_recommendation_for_cheap_ticket(self, make_client, ticket_value):
        async with make_client(rain_prob=10) as c:
            await c.post("/api/v1/session/stadium", json={"stadium_id": "blr"})
            resp = await c.post("/api/v1/recommendation", json={"ticket_value": ticket_value})
        assert resp.status_code == 200
        body = resp.json()
        assert body["tier_id"] == "basic"
        assert body["premium"] == 0
        assert body["expected_roi"] == 0.0
        assert body["recommendation"] == "not-recommended"


# ── Errors ────────────────────────────────────────────────────────────


class TestErrors:
    @pytest.mark.asyncio
    async def test_unknown_stadium_404(self, client):
        resp = await client.post(
            "/api/v1/session/stadium",
            json={"stadium_id": "lords"},
            headers={"X-Request-ID": "req-123"},
        )
        assert resp.status_code == 404
        body = resp.json()
        assert body["error"]["code"] == "E4000"
        assert body["error"]["retryable"] is False
        assert body["request_id"] == "req-123"

    @pytest.mark.asyncio
    async def test_quotes_before_stadium_409(self, client):
        resp = await client.post("/api/v1/quotes", json={"ticket_value": 2500})
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "E4100"

    @pytest.mark.asyncio
    async def test_settle_without_policy_409(self, client):
        resp = await client.post("/api/v1/policy/settle")
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_ticket_value_422(self, client):
        resp = await client.post("/api/v1/quotes", json={"ticket_value": 0})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_forecast_outage_is_retryable(self, make_client):
        async with make_client(status_code=503) as c:
            resp = await c.post("/api/v1/session/stadium", json={"stadium_id": "mum"})
        assert resp.status_code == 503
        error = resp.json()["error"]
        assert error["code"] == "E5000"
        assert error["retryable"] is True

    @pytest.mark.asyncio
    async def test_insufficient_funds_402(self, make_client):
        async with make_client(starting_wallet=50) as c:
            await c.post("/api/v1/session/stadium", json={"stadium_id": "blr"})
            resp = await c.post("/api/v1/policy", json={"tier_id": "basic", "ticket_value": 2500})
        assert resp.status_code == 402
        assert resp.json()["error"]["code"] == "E4101"


class TestRequestContext:
    @pytest.mark.asyncio
    async def test_upstream_request_id_echoed(self, client):
        resp = await client.get("/api/v1/stadiums", headers={"X-Request-ID": "trace-42"})
        assert resp.headers["X-Request-ID"] == "trace-42"
        assert resp.headers["X-Response-Time"].endswith("ms")

    @pytest.mark.asyncio
    async def test_oversized_request_id_replaced(self, client):
        resp = await client.get("/api/v1/stadiums", headers={"X-Request-ID": "x" * 200})
        assert resp.headers["X-Request-ID"] != "x" * 200
        assert len(resp.headers["X-Request-ID"]) == 36
