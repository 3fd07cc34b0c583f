"""
Parallel citation sources.

Each citation sub-type maps to an ordered list of resolvers. The first
resolver in the list that applies to the sub-type's payload is the one that
runs, so the list order is the precedence between sources (e.g. for a law:
GovInfo MODS, then the historical ledger, then the GovTrack search page).
"""
from typing import Optional

from legislink_core.citation_types import CitationTypeRegistry, default_registry
from legislink_core.ledger import Ledger
from legislink_core.resolvers.base import SourceResolver, fetch, get_link
from legislink_core.resolvers.courtlistener import CourtListenerSearchResolver
from legislink_core.resolvers.govtrack import GovTrackLandingResolver
from legislink_core.resolvers.house import HouseSectionValidator
from legislink_core.resolvers.legisworks import LegisworksLawResolver
from legislink_core.resolvers.mods import ModsResolver

Strategies = dict[str, list[SourceResolver]]


def build_default_strategies(
    ledger: Ledger,
    registry: Optional[CitationTypeRegistry] = None,
) -> Strategies:
    registry = registry or default_registry()
    mods = ModsResolver(registry)
    return {
        "stat": [mods],
        "law": [mods, LegisworksLawResolver(registry, ledger), GovTrackLandingResolver(registry)],
        "usc": [HouseSectionValidator(registry)],
        "cfr": [mods],
        "fedreg": [mods],
        "reporter": [CourtListenerSearchResolver(registry)],
    }


__all__ = [
    "SourceResolver",
    "Strategies",
    "build_default_strategies",
    "fetch",
    "get_link",
    "ModsResolver",
    "LegisworksLawResolver",
    "GovTrackLandingResolver",
    "HouseSectionValidator",
    "CourtListenerSearchResolver",
]
