"""Resolve user-supplied protocol names to canonical Hindenrank slugs.

Slugs are a normalised form of display names, but not always the naive one
("Aave" is ``aave-v3``). The direct lookup is tried first because it usually
matches; only a 404 falls back to search. Any other API error propagates so
an outage is reported as an outage, not as "protocol not found".
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from pydantic import BaseModel, Field

from .clients.hindenrank import HindenrankClient, ProtocolNotFoundError
from .models import Protocol

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^a-z0-9-]")


class Resolution(BaseModel):
    """A resolved name. ``protocol`` is set only when the direct lookup hit."""

    slug: str
    protocol: Optional[Protocol] = None


class ResolutionOutcome(BaseModel):
    """Result of resolving several names. Order and duplicates are preserved."""

    resolved: list[str] = Field(default_factory=list)
    unresolved: list[str] = Field(default_factory=list)


def normalize_slug(name: str) -> str:
    """Best-guess slug for a display name: 'Aave V3' -> 'aave-v3'."""
    slug = _WHITESPACE_RE.sub("-", name.strip().lower())
    return _NON_SLUG_RE.sub("", slug)


async def resolve_slug(client: HindenrankClient, name: str) -> Optional[Resolution]:
    """Map a name to a slug, or None if neither lookup nor search finds it."""
    if not name.strip():
        return None

    candidate = normalize_slug(name)
    if candidate:
        try:
            response = await client.get_protocol(candidate)
            return Resolution(slug=response.data.slug, protocol=response.data)
        except ProtocolNotFoundError:
            logger.info("No protocol at slug '%s', searching for '%s'", candidate, name)

    search = await client.search_protocols(name, limit=1)
    if not search.data:
        logger.info("No search results for '%s'", name)
        return None
    return Resolution(slug=search.data[0].slug)


async def resolve_protocol(client: HindenrankClient, name: str) -> Optional[Protocol]:
    """Resolve a name and return the full protocol record."""
    resolution = await resolve_slug(client, name)
    if resolution is None:
        return None
    if resolution.protocol is not None:
        return resolution.protocol

    # Search hits can be abbreviated; fetch the full record by the authoritative slug.
    try:
        response = await client.get_protocol(resolution.slug)
    except ProtocolNotFoundError:
        logger.warning("Search returned slug '%s' for '%s' but it could not be fetched", resolution.slug, name)
        return None
    return response.data


async def resolve_many(client: HindenrankClient, names: list[str]) -> ResolutionOutcome:
    """Resolve each name independently, collecting the ones that fail."""
    outcome = ResolutionOutcome()
    for name in names:
        resolution = await resolve_slug(client, name)
        if resolution is None:
            outcome.unresolved.append(name)
        else:
            outcome.resolved.append(resolution.slug)
    return outcome
