"""
Historical Statutes at Large ledger.

Reads the per-volume YAML files of the Legisworks historical statutes data
(one file per volume, "NNN.yaml") and answers range queries against them.

Early volumes of the Statutes at Large do not have page numbers that are
unique per instrument, so a volume/page reference can land inside the body of
one or more statutes. query() returns every entry that starts on or spans the
requested page.

Usage:
    ledger = Ledger("legisworks-historical-statutes/data")
    for entry in ledger.query(43, 1):
        print(entry.volume, entry.page, entry.display_title)
"""
import logging
from pathlib import Path
from typing import Optional, Union

import yaml

from legislink_core.exceptions import DataNotFound, ParseError
from legislink_core.models import LedgerEntry

logger = logging.getLogger(__name__)

DEFAULT_LEDGER_DIR = "legisworks-historical-statutes/data"

# Congress -> Statutes at Large volume(s) holding its laws. Some Congresses
# span more than one volume because volumes break mid-Congress.
CONGRESS_VOLUMES: dict[int, tuple[int, ...]] = {
    60: (35,), 61: (36,), 62: (37,), 63: (38,), 64: (39,),
    65: (40,), 66: (41,), 67: (42,), 68: (43,), 69: (44,),
    70: (45,), 71: (46,), 72: (47,), 73: (48,), 74: (49,),
    75: (50, 51, 52),
    76: (53, 54), 77: (55, 56), 78: (57, 58), 79: (59, 60),
    80: (61, 62), 81: (63, 64),
}


def volumes_for_congress(congress: int) -> tuple[int, ...]:
    return CONGRESS_VOLUMES.get(congress, ())


def parse_page(page: Union[int, str, None]) -> Optional[int]:
    """Pages arrive as strings from the citation parser."""
    try:
        return int(str(page).strip())
    except (TypeError, ValueError):
        return None


class Ledger:
    """
    Read-only access to the historical ledger files.

    Cache strategy:
    - Off by default; every query re-reads the volume file
    - cache=True keeps loaded volumes for the lifetime of the instance
      (create a new instance to clear)
    """

    def __init__(self, data_dir: Union[str, Path] = DEFAULT_LEDGER_DIR, cache: bool = False):
        self.data_dir = Path(data_dir)
        self.cache_enabled = cache
        self._cache: dict[int, list[LedgerEntry]] = {}

    def path_for(self, volume: int) -> Path:
        return self.data_dir / f"{int(volume):03d}.yaml"

    def load(self, volume: int) -> list[LedgerEntry]:
        """
        Load all entries of one volume, in file order.

        Raises:
            DataNotFound: If the volume file does not exist
            ParseError: If the file is not a YAML list of entries
        """
        volume = int(volume)
        if volume in self._cache:
            return self._cache[volume]

        path = self.path_for(volume)
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except FileNotFoundError:
            raise DataNotFound(volume, str(path)) from None
        except yaml.YAMLError as e:
            raise ParseError(str(path), str(e)) from e

        if raw is None:
            raw = []
        if not isinstance(raw, list):
            raise ParseError(str(path), "expected a list of entries")

        entries = []
        for item in raw:
            try:
                entries.append(LedgerEntry.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug("Skipping malformed ledger row in %s: %s", path, e)

        if self.cache_enabled:
            self._cache[volume] = entries
        return entries

    def query(self, volume: int, page: Union[int, str]) -> list[LedgerEntry]:
        """
        Find the entries that start on or span a page.

        Ordering:
        1. Entries starting on the page come before entries that only span it
        2. Within each group, entries later in the ledger come first

        Returns:
            Matching entries (empty if the page is not numeric or nothing matches)
        """
        volume = int(volume)
        entries = self.load(volume)
        page_num = parse_page(page)
        if page_num is None:
            return []

        matches = [
            entry for entry in entries
            if entry.volume == volume and entry.contains(page_num)
        ]
        matches.reverse()
        # sorted() is stable, so reverse ledger order survives within each group
        return sorted(matches, key=lambda entry: not entry.starts_on(page_num))

    def query_law(
        self,
        volume: int,
        congress: int,
        number: int,
        law_type: str = "public",
    ) -> list[LedgerEntry]:
        """Find the entries of a volume recording a given law."""
        if law_type == "private":
            # The ledger does not distinguish private law numbers
            return []
        return [
            entry for entry in self.load(volume)
            if entry.congress == int(congress)
            and entry.number == int(number)
            and entry.type == "publaw"
        ]
