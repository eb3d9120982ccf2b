"""Shared fixtures: protocol payloads and a mocked Hindenrank client."""

from unittest.mock import AsyncMock

import pytest

from hindenrank_mcp import server
from hindenrank_mcp.core.clients.hindenrank import HindenrankClient
from hindenrank_mcp.core.models import ApiResponse, Protocol, ResponseMeta


@pytest.fixture
def protocol_payload():
    """Factory for camelCase protocol dicts as the API sends them."""

    def make(**overrides) -> dict:
        payload = {
            "slug": "aave-v3",
            "name": "Aave V3",
            "sector": "Lending",
            "website": "https://aave.com",
            "tvl": 1_500_000_000,
            "grade": "A",
            "rawScore": 12,
            "gradeBreakdown": {"security": 10, "centralization": 15},
            "topRisks": ["Oracle dependency"],
            "verdict": "Well-audited",
            "retailSummary": "Large, battle-tested lending market.",
            "lastScanned": "2024-01-01",
        }
        payload.update(overrides)
        return payload

    return make


@pytest.fixture
def make_protocol(protocol_payload):
    def make(**overrides) -> Protocol:
        return Protocol.model_validate(protocol_payload(**overrides))

    return make


@pytest.fixture
def envelope():
    """Wrap already-parsed models in an ApiResponse, as the client returns them."""

    def make(data, **meta) -> ApiResponse:
        return ApiResponse(data=data, meta=ResponseMeta.model_validate({"tier": "free", **meta}))

    return make


@pytest.fixture
def fake_client(monkeypatch):
    """AsyncMock client installed as the server's process-wide client."""
    client = AsyncMock(spec=HindenrankClient)
    monkeypatch.setattr(server, "_client", client)
    return client
