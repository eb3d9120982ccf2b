"""Hindenrank MCP Server.

FastMCP server with 5 read-only tools for DeFi protocol risk.
Run: hindenrank-mcp
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from .config import get_settings
from .core.clients.hindenrank import HindenrankClient
from .core.formatting import (
    format_comparison,
    format_protocol_list,
    format_protocol_risk,
    format_search_results,
    format_sectors,
    protocol_not_found,
)
from .core.resolution import resolve_many, resolve_protocol

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)

MIN_COMPARE = 2
MAX_COMPARE = 5

_client: Optional[HindenrankClient] = None


def get_client() -> HindenrankClient:
    """The process-wide client, built from the environment on first use."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = HindenrankClient(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
        )
    return _client


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging and build the API client before the first tool call."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    client = get_client()
    if not client.has_api_key:
        logger.warning("HINDENRANK_API_KEY not set, compare_protocols will be rejected by the API")
    logger.info("Hindenrank MCP server ready (API: %s)", client.base_url)
    yield


mcp = FastMCP(
    "Hindenrank",
    instructions="Check how risky a DeFi protocol is before interacting with it: risk grades, top risks, verdicts, and side-by-side comparisons from Hindenrank.",
    lifespan=lifespan,
)


# ─── Tool 1: Protocol Risk ───────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def get_protocol_risk(
    name: Annotated[str, Field(description="Protocol name or slug (e.g., 'Aave V3', 'compound', 'lido')")],
) -> str:
    """Look up the risk grade, top risks, and verdict for a DeFi protocol.

    Accepts protocol name or slug (e.g., 'Aave', 'uniswap-v3').
    Use this before interacting with any DeFi protocol to check its safety.
    """
    protocol = await resolve_protocol(get_client(), name)
    if protocol is None:
        return protocol_not_found(name)
    return format_protocol_risk(protocol)


# ─── Tool 2: Search ──────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def search_protocols(
    query: Annotated[str, Field(min_length=2, description="Search query (min 2 characters)")],
    limit: Annotated[int, Field(ge=1, le=50, description="Maximum results to return (default 10, max 50)")] = 10,
) -> str:
    """Search for DeFi protocols by name. Returns matching protocols with their risk grades.

    Useful when you don't know the exact protocol name.
    """
    result = await get_client().search_protocols(query, limit)
    return format_search_results(query, result.data)


# ─── Tool 3: List ────────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def list_protocols(
    sector: Annotated[
        Optional[str], Field(description="Filter by sector: DeFi, L1, L2, Lending, DEX, Stablecoin, Restaking, etc.")
    ] = None,
    min_grade: Annotated[
        Optional[str], Field(description="Minimum risk grade (e.g., 'C' to only show C or riskier)")
    ] = None,
    max_grade: Annotated[
        Optional[str], Field(description="Maximum risk grade (e.g., 'B' to only show B or safer)")
    ] = None,
    limit: Annotated[int, Field(ge=1, description="Maximum results (default 20)")] = 20,
    offset: Annotated[Optional[int], Field(ge=0, description="Number of results to skip, for paging")] = None,
) -> str:
    """List DeFi protocols with optional filters.

    Filter by sector (e.g., 'Lending', 'DEX') or grade range.
    Returns protocols sorted by risk score (riskiest first).
    """
    result = await get_client().list_protocols(
        sector=sector,
        min_grade=min_grade,
        max_grade=max_grade,
        limit=limit,
        offset=offset,
    )
    return format_protocol_list(result.data, result.meta.total)


# ─── Tool 4: Compare ─────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def compare_protocols(
    protocols: Annotated[
        list[str],
        Field(min_length=MIN_COMPARE, max_length=MAX_COMPARE, description="Protocol names or slugs to compare (2-5)"),
    ],
) -> str:
    """Compare 2-5 DeFi protocols side by side.

    Shows risk grades, key risks, and identifies the safest, riskiest, and
    best value option. Requires an API key (free tier or above).
    """
    if not MIN_COMPARE <= len(protocols) <= MAX_COMPARE:
        return "Please provide 2-5 protocol names or slugs to compare."

    client = get_client()
    outcome = await resolve_many(client, protocols)
    if outcome.unresolved:
        logger.info("Could not resolve for comparison: %s", ", ".join(outcome.unresolved))

    if len(outcome.resolved) < MIN_COMPARE:
        return f"Could only find {len(outcome.resolved)} of the requested protocols. Make sure the names are correct."

    result = await client.compare_protocols(outcome.resolved)
    return format_comparison(result.data)


# ─── Tool 5: Sectors ─────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def list_sectors() -> str:
    """List DeFi sectors with protocol counts and average risk scores.

    Useful for picking a sector filter for list_protocols.
    """
    result = await get_client().list_sectors()
    return format_sectors(result.data)


def main():
    """Entry point for the CLI command."""
    try:
        get_settings()
        mcp.run()
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
