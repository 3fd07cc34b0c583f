"""
Ambiguous Statutes at Large expansion.

Before volume 65 the Statutes at Large have no reliable one-page-one-statute
mapping, so a "43 Stat. 5" reference may point inside one or more
instruments. explode() turns such a reference into independent candidate
citations using the historical ledger.

Candidates are never merged or ranked beyond the ledger query order: when
more than one entry matches, each candidate carries disambiguation text and
the caller decides.
"""
import logging
from typing import Any, Optional

from legislink_core.citation_types import CitationTypeRegistry, default_registry
from legislink_core.ledger import Ledger, parse_page
from legislink_core.models import Citation, LedgerEntry

logger = logging.getLogger(__name__)

# Highest volume resolved through the historical ledger
AMBIGUOUS_VOLUME_LIMIT = 64
# Public law numbering in the ledger starts with the 38th Congress
FIRST_NUMBERED_LAW_CONGRESS = 38

LEGISWORKS_SOURCE = {
    "name": "Legisworks",
    "abbreviation": "Legisworks",
    "link": "https://github.com/unitedstates/legisworks-historical-statutes",
    "authoritative": False,
}
LEGISWORKS_PDF_BASE = "https://govtrackus.s3.amazonaws.com/legislink/pdf/stat"


def legisworks_link(entry: LedgerEntry, note: Optional[str] = None) -> dict[str, Any]:
    """Link descriptor for the scanned volume page of a ledger entry."""
    source = dict(LEGISWORKS_SOURCE)
    if note:
        source["note"] = note
    return {
        "source": source,
        "pdf": f"{LEGISWORKS_PDF_BASE}/{entry.volume}/{entry.file}",
    }


def is_ambiguous(citation: Citation) -> bool:
    if "stat" not in citation:
        return False
    volume = parse_page(citation.part("stat").get("volume"))
    return volume is not None and volume <= AMBIGUOUS_VOLUME_LIMIT


def explode(
    citation: Citation,
    ledger: Ledger,
    registry: Optional[CitationTypeRegistry] = None,
) -> list[Citation]:
    """
    Expand an ambiguous statute citation into candidate citations.

    Args:
        citation: Parsed citation, possibly carrying a "stat" part
        ledger: Historical ledger to match against
        registry: Citation type registry (default: default_registry())

    Returns:
        Candidate citations in ledger query order, or [citation] when the
        citation is not ambiguous or nothing in the ledger matches

    Raises:
        DataNotFound: If the ledger has no file for the citation's volume
    """
    if not is_ambiguous(citation):
        return [citation]

    registry = registry or default_registry()
    stat = citation.part("stat")
    matches = ledger.query(stat["volume"], stat["page"])
    if not matches:
        logger.debug("No ledger match for %s Stat. %s", stat["volume"], stat["page"])
        return [citation]

    queried_page = parse_page(stat["page"])
    candidates = []
    for entry in matches:
        # Identity comes from the original reference so link templates agree
        candidate = registry.create_citation("stat", {
            "volume": stat["volume"],
            "page": stat["page"],
        })
        candidate.title = entry.display_title
        candidate.citation = f"{entry.volume} Stat. {entry.page}"

        if len(matches) > 1:
            candidate.disambiguation = entry.citation

        note = None
        if not entry.starts_on(queried_page):
            note = f"Link is to an internal page within a statute beginning on page {entry.page}."
        candidate.part("stat")["links"]["legisworks"] = legisworks_link(entry, note)

        if (entry.congress or 0) >= FIRST_NUMBERED_LAW_CONGRESS and entry.type == "publaw":
            law = registry.create_citation("law", {
                "congress": entry.congress,
                "type": "public",
                "number": entry.number,
            })
            law.title = entry.display_title
            candidate.parallel_citations = [law]

        candidates.append(candidate)

    return candidates
