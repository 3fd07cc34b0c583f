"""
Citation Type Registry.

Computes the stable identity, canonical display string and external link
descriptors for each citation type, and builds fresh Citation objects from
their defining fields.

Design:
- One CitationType subclass per type code (see models.CITATION_TYPES)
- Identity is a slash-joined path of the defining fields; two citations with
  the same id refer to the same instrument
- Link descriptors follow the {source: {...}, landing/pdf/mods/html: url}
  shape consumed by the source resolvers and display layer
- The registry is an explicit object passed to explode() and the resolvers

Usage:
    registry = default_registry()
    cite = registry.create_citation("law", {"congress": 67, "type": "public", "number": 1})
    print(cite.id, cite.citation)
"""
from abc import ABC, abstractmethod
from typing import Any, Optional
from urllib.parse import urlencode

from legislink_core.exceptions import UnknownCitationType
from legislink_core.models import Citation


# =============================================================================
# LINK SOURCES
# =============================================================================

USGPO_SOURCE = {
    "name": "U.S. Government Publishing Office",
    "abbreviation": "US GPO",
    "link": "https://www.govinfo.gov",
    "authoritative": True,
}

GOVTRACK_SOURCE = {
    "name": "GovTrack.us",
    "abbreviation": "GovTrack.us",
    "link": "https://www.govtrack.us",
    "authoritative": False,
}

CONGRESS_GOV_SOURCE = {
    "name": "Congress.gov",
    "abbreviation": "Congress.gov",
    "link": "https://www.congress.gov",
    "authoritative": True,
}

HOUSE_SOURCE = {
    "name": "House Office of the Law Revision Counsel",
    "abbreviation": "House OLRC",
    "link": "https://uscode.house.gov",
    "authoritative": True,
}

CORNELL_SOURCE = {
    "name": "Legal Information Institute",
    "abbreviation": "LII",
    "link": "https://www.law.cornell.edu",
    "authoritative": False,
}

COURTLISTENER_SOURCE = {
    "name": "Court Listener",
    "abbreviation": "CL",
    "link": "https://www.courtlistener.com",
    "authoritative": False,
}

# GovInfo scans of the Statutes at Large begin with volume 65 (1951)
USGPO_FIRST_STAT_VOLUME = 65
# GovInfo public and private law packages begin with the 104th Congress
USGPO_FIRST_LAW_CONGRESS = 104
# Earlier laws are covered by the historical ledger instead
GOVTRACK_FIRST_LAW_CONGRESS = 82
# Federal Register on GovInfo begins with volume 59 (1994)
USGPO_FIRST_FEDREG_VOLUME = 59
CONGRESS_GOV_FIRST_CONGRESS = 93

# Bill type code -> (display prefix, congress.gov path segment)
BILL_TYPES: dict[str, tuple[str, str]] = {
    "hr": ("H.R.", "house-bill"),
    "s": ("S.", "senate-bill"),
    "hres": ("H.Res.", "house-resolution"),
    "sres": ("S.Res.", "senate-resolution"),
    "hjres": ("H.J.Res.", "house-joint-resolution"),
    "sjres": ("S.J.Res.", "senate-joint-resolution"),
    "hconres": ("H.Con.Res.", "house-concurrent-resolution"),
    "sconres": ("S.Con.Res.", "senate-concurrent-resolution"),
}


def ordinal(number: int) -> str:
    """117 -> '117th', 101 -> '101st'."""
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def _int_or_none(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# =============================================================================
# CITATION TYPES
# =============================================================================

class CitationType(ABC):
    """Identity, display and link rules for one citation type."""

    key: str = ""
    name: str = ""

    @abstractmethod
    def id(self, fields: dict[str, Any]) -> str:
        pass

    def canonical(self, fields: dict[str, Any]) -> Optional[str]:
        return None

    def links(self, fields: dict[str, Any]) -> dict[str, dict[str, Any]]:
        return {}


class StatuteType(CitationType):
    key = "stat"
    name = "U.S. Statutes at Large"

    def id(self, fields):
        return f"stat/{fields['volume']}/{fields['page']}"

    def canonical(self, fields):
        return f"{fields['volume']} Stat. {fields['page']}"

    def links(self, fields):
        volume = _int_or_none(fields.get("volume"))
        if volume is None or volume < USGPO_FIRST_STAT_VOLUME:
            return {}
        package = f"STATUTE-{volume}"
        granule = f"{package}-Pg{fields['page']}"
        return {
            "usgpo": {
                "source": dict(USGPO_SOURCE),
                "landing": f"https://www.govinfo.gov/app/details/{package}/{granule}",
                "pdf": f"https://www.govinfo.gov/content/pkg/{package}/pdf/{granule}.pdf",
                "mods": f"https://www.govinfo.gov/metadata/granule/{package}/{granule}/mods.xml",
            }
        }


class LawType(CitationType):
    key = "law"
    name = "U.S. Law"

    def id(self, fields):
        return f"us-law/{fields.get('type', 'public')}/{fields['congress']}/{fields['number']}"

    def canonical(self, fields):
        prefix = "Pvt. L." if fields.get("type") == "private" else "Pub. L."
        return f"{prefix} {fields['congress']}-{fields['number']}"

    def links(self, fields):
        links: dict[str, dict[str, Any]] = {}
        congress = _int_or_none(fields.get("congress"))
        if congress is None:
            return links
        is_private = fields.get("type") == "private"

        if congress >= USGPO_FIRST_LAW_CONGRESS:
            package = f"PLAW-{congress}{'pvtl' if is_private else 'publ'}{fields['number']}"
            links["usgpo"] = {
                "source": dict(USGPO_SOURCE),
                "landing": f"https://www.govinfo.gov/app/details/{package}",
                "pdf": f"https://www.govinfo.gov/content/pkg/{package}/pdf/{package}.pdf",
                "mods": f"https://www.govinfo.gov/metadata/pkg/{package}/mods.xml",
            }

        if not is_private and congress >= GOVTRACK_FIRST_LAW_CONGRESS:
            # Search page; redirects to the bill when the law is unambiguous
            query = urlencode({"q": f"Public Law {congress}-{fields['number']}"})
            links["govtrack"] = {
                "source": dict(GOVTRACK_SOURCE),
                "landing": f"https://www.govtrack.us/search?{query}",
            }

        return links


class USCodeType(CitationType):
    key = "usc"
    name = "U.S. Code"

    def id(self, fields):
        return f"usc/{fields['title']}/{fields['section']}"

    def canonical(self, fields):
        return f"{fields['title']} U.S.C. {fields['section']}"

    def links(self, fields):
        title, section = fields["title"], fields["section"]
        return {
            "house": {
                "source": dict(HOUSE_SOURCE),
                "html": (
                    "https://uscode.house.gov/view.xhtml?req=granuleid:"
                    f"USC-prelim-title{title}-section{section}&num=0&edition=prelim"
                ),
            },
            "cornell": {
                "source": dict(CORNELL_SOURCE),
                "landing": f"https://www.law.cornell.edu/uscode/text/{title}/{section}",
            },
        }


class CFRType(CitationType):
    key = "cfr"
    name = "Code of Federal Regulations"

    def id(self, fields):
        ident = f"cfr/{fields['title']}/{fields['part']}"
        if fields.get("section"):
            ident += f"/{fields['section']}"
        return ident

    def canonical(self, fields):
        return f"{fields['title']} CFR {fields.get('section') or fields['part']}"

    def links(self, fields):
        base = f"https://www.govinfo.gov/link/cfr/{fields['title']}/{fields['part']}"
        params: dict[str, Any] = {"year": "mostrecent"}
        if fields.get("section"):
            params["sectionnum"] = str(fields["section"]).split(".")[-1]
        return {
            "usgpo": {
                "source": dict(USGPO_SOURCE),
                "pdf": f"{base}?{urlencode({**params, 'link-type': 'pdf'})}",
                "mods": f"{base}?{urlencode({**params, 'link-type': 'mods'})}",
            }
        }


class FederalRegisterType(CitationType):
    key = "fedreg"
    name = "Federal Register"

    def id(self, fields):
        return f"fedreg/{fields['volume']}/{fields['page']}"

    def canonical(self, fields):
        return f"{fields['volume']} FR {fields['page']}"

    def links(self, fields):
        volume = _int_or_none(fields.get("volume"))
        if volume is None or volume < USGPO_FIRST_FEDREG_VOLUME:
            return {}
        base = f"https://www.govinfo.gov/link/fr/{volume}/{fields['page']}"
        return {
            "usgpo": {
                "source": dict(USGPO_SOURCE),
                "pdf": f"{base}?link-type=pdf",
                "mods": f"{base}?link-type=mods",
            }
        }


class BillType(CitationType):
    key = "us_bill"
    name = "U.S. Legislation"

    def id(self, fields):
        return f"us-bill/{fields['congress']}/{fields['bill_type']}/{fields['number']}"

    def canonical(self, fields):
        prefix = BILL_TYPES.get(fields["bill_type"], (fields["bill_type"].upper(), ""))[0]
        congress = _int_or_none(fields["congress"])
        session = f"{ordinal(congress)} Congress" if congress else f"{fields['congress']} Congress"
        return f"{prefix} {fields['number']} ({session})"

    def links(self, fields):
        congress, bill_type, number = fields["congress"], fields["bill_type"], fields["number"]
        links: dict[str, dict[str, Any]] = {
            "govtrack": {
                "source": dict(GOVTRACK_SOURCE),
                "landing": f"https://www.govtrack.us/congress/bills/{congress}/{bill_type}{number}",
            }
        }
        congress_num = _int_or_none(congress)
        if congress_num and congress_num >= CONGRESS_GOV_FIRST_CONGRESS and bill_type in BILL_TYPES:
            links["congress_gov"] = {
                "source": dict(CONGRESS_GOV_SOURCE),
                "landing": (
                    f"https://www.congress.gov/bill/{ordinal(congress_num)}-congress/"
                    f"{BILL_TYPES[bill_type][1]}/{number}"
                ),
            }
        return links


class ReporterType(CitationType):
    key = "reporter"
    name = "Case Law"

    def id(self, fields):
        return f"reporter/{fields['reporter']}/{fields['volume']}/{fields['page']}"

    def canonical(self, fields):
        return f"{fields['volume']} {fields['reporter']} {fields['page']}"

    def links(self, fields):
        query = urlencode({
            "type": "o",
            "citation": f"{fields['volume']} {fields['reporter']} {fields['page']}",
        })
        return {
            "courtlistener": {
                "source": dict(COURTLISTENER_SOURCE),
                "landing": f"https://www.courtlistener.com/?{query}",
            }
        }


# =============================================================================
# REGISTRY
# =============================================================================

class CitationTypeRegistry:
    """Lookup of CitationType implementations by type code."""

    def __init__(self, types: Optional[list[CitationType]] = None):
        self._types: dict[str, CitationType] = {}
        for citation_type in types or []:
            self.register(citation_type)

    def register(self, citation_type: CitationType) -> None:
        self._types[citation_type.key] = citation_type

    def get(self, key: str) -> CitationType:
        try:
            return self._types[key]
        except KeyError:
            raise UnknownCitationType(f"Unknown citation type: {key}") from None

    def __contains__(self, key: str) -> bool:
        return key in self._types

    def id_for(self, key: str, fields: dict[str, Any]) -> str:
        return self.get(key).id(fields)

    def links_for(self, key: str, fields: dict[str, Any]) -> dict[str, dict[str, Any]]:
        return self.get(key).links(fields)

    def create_citation(
        self,
        key: str,
        fields: dict[str, Any],
        title: Optional[str] = None,
    ) -> Citation:
        """
        Build a fresh Citation of the given type from its defining fields.

        The payload receives the computed "id" and "links"; the citation gets
        the type's display name, its canonical string, and a title taken from
        fields["title"] when none is passed explicitly.
        """
        citation_type = self.get(key)
        payload = dict(fields)
        payload["id"] = citation_type.id(payload)
        payload["links"] = citation_type.links(payload)
        return Citation(
            type=key,
            type_name=citation_type.name,
            citation=citation_type.canonical(payload),
            title=title if title is not None else fields.get("title"),
            parts={key: payload},
        )


def default_registry() -> CitationTypeRegistry:
    return CitationTypeRegistry([
        StatuteType(),
        LawType(),
        USCodeType(),
        CFRType(),
        FederalRegisterType(),
        BillType(),
        ReporterType(),
    ])
