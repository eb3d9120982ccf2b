"""Hindenrank MCP Server.

Ask your AI how risky a DeFi protocol is: risk grades, top risks, verdicts,
search, filtered listings, and side-by-side comparisons from Hindenrank.
"""

__version__ = "0.1.0"
