"""Plain-text rendering of API results for tool responses.

Every tool returns one text block. Optional fields (TVL, value grade, top
risks, verdict) are omitted when absent rather than printed as blanks.
"""

from __future__ import annotations

from typing import Optional, Union

from .models import ComparisonResult, Protocol, SectorInfo

Number = Union[int, float]

COMPARISON_TITLE = "Protocol Comparison\n"
COMPARISON_DIVIDER = "═══════════════════\n"


def plain_number(n: Optional[Number]) -> str:
    """Render a number without a trailing '.0' for integral values."""
    if n is None:
        return "?"
    if isinstance(n, float) and n.is_integer():
        return str(int(n))
    return str(n)


def text_or_placeholder(value: Optional[str]) -> str:
    """Render optional text, using '?' when the service sent null."""
    return "?" if value is None else value


def format_number(n: Number) -> str:
    """Compact magnitude formatting: 1.50B, 2.30M, 4.5K, or the plain number."""
    if n >= 1_000_000_000:
        return f"{n / 1_000_000_000:.2f}B"
    if n >= 1_000_000:
        return f"{n / 1_000_000:.2f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return plain_number(n)


def _tvl_suffix(protocol: Protocol) -> str:
    if protocol.tvl is None:
        return ""
    return f" | TVL: ${format_number(protocol.tvl)}"


def format_protocol_risk(protocol: Protocol) -> str:
    """Full risk card for a single protocol."""
    parts = [
        f"{protocol.name} ({protocol.slug})",
        f"Risk Grade: {text_or_placeholder(protocol.grade)} ({plain_number(protocol.raw_score)}/100 — lower is safer)",
    ]

    if protocol.has_value_grade:
        parts.append(
            f"Value Grade: {text_or_placeholder(protocol.value_grade)} ({plain_number(protocol.value_raw_score)}/100 — higher is better)"
        )

    if protocol.tvl is not None:
        parts.append(f"TVL: ${format_number(protocol.tvl)}")

    parts.append(f"Sector: {text_or_placeholder(protocol.sector)}")
    parts.append(f"Last Scanned: {text_or_placeholder(protocol.last_scanned)}")

    if protocol.top_risks:
        parts.append("")
        parts.append("Top Risks:")
        for risk in protocol.top_risks:
            parts.append(f"  - {risk}")

    if protocol.verdict:
        parts.append("")
        parts.append(f"Verdict: {protocol.verdict}")

    return "\n".join(parts)


def protocol_not_found(name: str) -> str:
    return f'No protocol found matching "{name}". Try a different name or check https://hindenrank.com for the full list.'


def format_search_results(query: str, protocols: list[Protocol]) -> str:
    if not protocols:
        return f'No protocols found matching "{query}".'

    lines = [f'Found {len(protocols)} protocol(s) matching "{query}":\n']
    for p in protocols:
        lines.append(f"- {p.name} ({p.slug}) — Grade: {text_or_placeholder(p.grade)} ({plain_number(p.raw_score)}/100){_tvl_suffix(p)}")
    return "\n".join(lines)


def format_protocol_list(protocols: list[Protocol], total: Optional[int]) -> str:
    if not protocols:
        return "No protocols match the given filters."

    lines = [f"Showing {len(protocols)} of {plain_number(total)} protocols:\n"]
    for p in protocols:
        lines.append(
            f"- {p.name} — Grade: {text_or_placeholder(p.grade)} ({plain_number(p.raw_score)}/100){_tvl_suffix(p)} | {text_or_placeholder(p.sector)}"
        )
    return "\n".join(lines)


def format_comparison(result: ComparisonResult) -> str:
    """Side-by-side block in the order the service returned the protocols."""
    labels = result.comparison
    lines = [COMPARISON_TITLE, COMPARISON_DIVIDER]

    for slug, p in result.protocols.items():
        if slug == labels.safest:
            marker = " ✦ SAFEST"
        elif slug == labels.riskiest:
            marker = " ⚠ RISKIEST"
        else:
            marker = ""
        lines.append(f"{p.name}{marker}")
        lines.append(f"  Risk: {text_or_placeholder(p.grade)} ({plain_number(p.raw_score)}/100){_tvl_suffix(p)}")
        if p.top_risks:
            lines.append(f"  Key risks: {', '.join(p.top_risks[:2])}")
        lines.append("")

    lines.append("Summary:")
    lines.append(f"  Safest: {result.display_name(labels.safest)}")
    lines.append(f"  Riskiest: {result.display_name(labels.riskiest)}")
    lines.append(f"  Best Value: {result.display_name(labels.best_value)}")

    if result.not_found:
        lines.append(f"\nNot found: {', '.join(result.not_found)}")

    return "\n".join(lines)


def format_sectors(sectors: list[SectorInfo]) -> str:
    if not sectors:
        return "No sectors available."

    lines = [f"Found {len(sectors)} sector(s):\n"]
    for s in sectors:
        lines.append(f"- {s.name} — {s.protocol_count} protocol(s), avg score {s.average_raw_score:.1f}/100")
    return "\n".join(lines)
