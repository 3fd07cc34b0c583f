from dataclasses import dataclass, field
from typing import Any, Optional


# =============================================================================
# CITATION TYPES
# =============================================================================
#
# A citation is keyed by one of a closed set of type codes. The same codes are
# used as the keys of the per-type payloads ("parts") on a Citation, so a
# citation found while resolving a statute may carry both a "stat" and a "law"
# payload.
#
#   stat      U.S. Statutes at Large        (volume, page)
#   law       Public / private law          (congress, type, number)
#   usc       U.S. Code section             (title, section)
#   cfr       Code of Federal Regulations   (title, part, section)
#   fedreg    Federal Register              (volume, page)
#   us_bill   Bill or resolution            (congress, bill_type, number)
#   reporter  Case reporter                 (volume, reporter, page)
# =============================================================================

CITATION_TYPES: tuple[str, ...] = (
    "stat",
    "law",
    "usc",
    "cfr",
    "fedreg",
    "us_bill",
    "reporter",
)


# =============================================================================
# CORE DATA MODELS
# =============================================================================

@dataclass
class Citation:
    """A structured legal citation.

    parts holds the type-specific payloads keyed by type code. Each payload
    is a plain dict carrying the defining fields, the derived "id" and a
    "links" mapping (source name -> link descriptor), which is the shape the
    external link sources and display layers exchange.

    Resolvers mutate links only inside the payload of the sub-type they
    resolve, so concurrent resolvers never write the same key."""
    type: str
    type_name: Optional[str] = None
    citation: Optional[str] = None
    title: Optional[str] = None
    disambiguation: Optional[str] = None
    parts: dict[str, dict[str, Any]] = field(default_factory=dict)
    parallel_citations: list["Citation"] = field(default_factory=list)

    def __contains__(self, part_type: str) -> bool:
        return part_type in self.parts

    def part(self, part_type: str) -> dict[str, Any]:
        return self.parts[part_type]

    @property
    def id(self) -> Optional[str]:
        payload = self.parts.get(self.type)
        return payload.get("id") if payload else None

    @property
    def links(self) -> dict[str, Any]:
        payload = self.parts.get(self.type) or {}
        return payload.get("links") or {}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "type_name": self.type_name,
            "citation": self.citation,
            "title": self.title,
        }
        if self.disambiguation:
            data["disambiguation"] = self.disambiguation
        for part_type, payload in self.parts.items():
            data[part_type] = payload
        if self.parallel_citations:
            data["parallel_citations"] = [c.to_dict() for c in self.parallel_citations]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Citation":
        parts = {
            key: dict(data[key])
            for key in CITATION_TYPES
            if isinstance(data.get(key), dict)
        }
        return cls(
            type=data["type"],
            type_name=data.get("type_name"),
            citation=data.get("citation"),
            title=data.get("title"),
            disambiguation=data.get("disambiguation"),
            parts=parts,
            parallel_citations=[cls.from_dict(c) for c in data.get("parallel_citations", [])],
        )


@dataclass
class LedgerEntry:
    """One row of the historical Statutes at Large ledger.

    KEY DIFFERENCES vs Citation:
    - page: the page the instrument STARTS on
    - Citation "stat" page: any page the reference points to, possibly an
      internal page of a longer instrument (see contains())"""
    volume: int
    page: int
    type: Optional[str] = None
    congress: Optional[int] = None
    number: Optional[int] = None
    npages: Optional[int] = None
    title: Optional[str] = None
    topic: Optional[str] = None
    file: Optional[str] = None
    citation: Optional[str] = None

    @property
    def display_title(self) -> Optional[str]:
        return self.title or self.topic

    def starts_on(self, page: int) -> bool:
        return self.page == page

    def contains(self, page: int) -> bool:
        if self.starts_on(page):
            return True
        if not self.npages:
            return False
        return self.page <= page < self.page + self.npages

    @classmethod
    def from_dict(cls, data: dict) -> "LedgerEntry":
        return cls(
            volume=int(data["volume"]),
            page=int(data["page"]),
            type=data.get("type"),
            congress=_optional_int(data.get("congress")),
            number=_optional_int(data.get("number")),
            npages=_optional_int(data.get("npages")),
            title=data.get("title"),
            topic=data.get("topic"),
            file=data.get("file"),
            citation=data.get("citation"),
        )


@dataclass
class EnrichmentResult:
    """A candidate citation plus the parallel citations found for it."""
    citation: Citation
    parallel_citations: list[Citation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "citation": self.citation.to_dict(),
            "parallel_citations": [c.to_dict() for c in self.parallel_citations],
        }


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
