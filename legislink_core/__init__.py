# Legislink Core Library
# Main entry point: from legislink_core.orchestrator import enrich

from .config import Environment, CourtListenerCredentials, load_config, load_environment
from .orchestrator import (
    ParallelCitationOrchestrator,
    enrich,
    enrich_citation,
)
from .expansion import explode
from .ledger import Ledger, CONGRESS_VOLUMES

from .models import (
    Citation,
    LedgerEntry,
    EnrichmentResult,
)

from .citation_types import (
    CitationType,
    CitationTypeRegistry,
    default_registry,
)

from .exceptions import (
    LegislinkError,
    DataNotFound,
    TransportError,
    ParseError,
    UnknownCitationType,
)

__all__ = [
    # Main entry points
    "enrich",
    "enrich_citation",
    "explode",
    "ParallelCitationOrchestrator",
    # Configuration
    "Environment",
    "CourtListenerCredentials",
    "load_config",
    "load_environment",
    # Ledger
    "Ledger",
    "CONGRESS_VOLUMES",
    # Models
    "Citation",
    "LedgerEntry",
    "EnrichmentResult",
    # Citation types
    "CitationType",
    "CitationTypeRegistry",
    "default_registry",
    # Errors
    "LegislinkError",
    "DataNotFound",
    "TransportError",
    "ParseError",
    "UnknownCitationType",
]
