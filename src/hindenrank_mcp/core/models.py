"""Pydantic models for Hindenrank API payloads.

Field names are snake_case in Python and camelCase on the wire. Records are
open: keys the service adds that are not declared here are kept in
``model_extra`` rather than dropped.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for every payload model: camelCase aliases, unknown keys preserved."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class Protocol(ApiModel):
    """A scored DeFi protocol as returned by the lookup, search and list endpoints."""

    slug: str
    name: str
    sector: Optional[str] = None
    website: Optional[str] = None
    tvl: Optional[float] = Field(None, description="Total value locked in USD")
    grade: Optional[str] = None
    raw_score: Optional[float] = Field(None, description="Risk score from 0 (safest) to 100")
    grade_breakdown: Optional[dict[str, float]] = Field(default_factory=dict)
    top_risks: Optional[list[str]] = Field(default_factory=list)
    verdict: Optional[str] = None
    retail_summary: Optional[str] = None
    last_scanned: Optional[str] = None
    value_grade: Optional[str] = None
    value_raw_score: Optional[float] = Field(None, description="Value score, higher is better")

    @property
    def has_value_grade(self) -> bool:
        """Whether the service sent a value grade at all (not every tier does)."""
        return "value_grade" in self.model_fields_set


class ComparisonLabels(ApiModel):
    """Slugs the service picked out of a comparison."""

    safest: Optional[str] = None
    riskiest: Optional[str] = None
    best_value: Optional[str] = None


class ComparisonResult(ApiModel):
    """Side-by-side comparison. ``protocols`` keeps the service's ordering."""

    protocols: dict[str, Protocol] = Field(default_factory=dict)
    comparison: ComparisonLabels = Field(default_factory=ComparisonLabels)
    not_found: Optional[list[str]] = Field(default_factory=list)

    def display_name(self, slug: Optional[str]) -> str:
        """Name of a compared protocol, the bare slug if the service didn't return it, or '?' if unlabelled."""
        if not slug:
            return "?"
        protocol = self.protocols.get(slug)
        return protocol.name if protocol else slug


class SectorInfo(ApiModel):
    """Aggregate figures for one sector."""

    name: str
    protocol_count: int = 0
    average_raw_score: float = 0.0


class RateLimitMeta(ApiModel):
    used: int = 0
    remaining: int = 0
    resets_at: str = ""


class ResponseMeta(ApiModel):
    """Envelope metadata. Reported by the service, never enforced here."""

    tier: str = ""
    rate_limit: Optional[RateLimitMeta] = None
    total: Optional[int] = None


class ApiResponse(ApiModel, Generic[T]):
    """The ``{"data": ..., "meta": ...}`` envelope every endpoint returns."""

    data: T
    meta: ResponseMeta = Field(default_factory=ResponseMeta)
