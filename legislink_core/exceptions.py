"""
Custom exceptions for the legislink enrichment pipeline.

Only DataNotFound is expected to reach callers of explode(); the other
errors are raised inside source resolvers and absorbed by the orchestrator.
"""
from typing import Optional


class LegislinkError(Exception):
    """Base exception for legislink errors."""
    pass


class DataNotFound(LegislinkError):
    """Ledger file for a requested Statutes at Large volume does not exist."""

    def __init__(self, volume: int, path: str):
        self.volume = volume
        self.path = path
        super().__init__(f"No ledger data for volume {volume} ({path})")


class TransportError(LegislinkError):
    """Network request to an external source failed."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        self.reason = reason
        message = f"Request to {url} failed"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ParseError(LegislinkError):
    """External document could not be parsed."""

    def __init__(self, source: str, reason: Optional[str] = None):
        self.source = source
        self.reason = reason
        message = f"Could not parse response from {source}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnknownCitationType(LegislinkError):
    """Citation type key is not registered."""
    pass
