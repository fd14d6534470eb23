"""
Company-name matching.

Show rows often spell a company differently from the Companies tab
("ABC Theatre Inc." vs "abc theater"). Names are compared on a normalized
key; the first display name seen for a key is the one kept.
"""

import logging
import re
from typing import Optional

from theatreevents.importer.columns import COMPANY_COLUMNS, ColumnResolver
from theatreevents.importer.normalize import normalize_text
from theatreevents.models import Company

logger = logging.getLogger(__name__)

MATCHING_MODES = ("normalized", "exact")

_WHITESPACE = re.compile(r"\s+")
_KC = re.compile(r"\bkc\b")
_INC = re.compile(r"\binc\b\.?")
_THEATRE = re.compile(r"\btheatre\b")


def normalize_company_name(name: Optional[str]) -> str:
    """Comparison key for a company name. Never shown to users."""
    if not name:
        return ""
    key = _WHITESPACE.sub(" ", name.strip().lower())
    key = _KC.sub("", key)
    key = _INC.sub("", key)
    key = _THEATRE.sub("theater", key)
    return _WHITESPACE.sub(" ", key).strip()


class CompanyMatcher:
    """Resolves company references for one import batch."""

    def __init__(self, matching: str = "normalized"):
        if matching not in MATCHING_MODES:
            raise ValueError(f"Unknown company matching mode: {matching!r}")
        self.matching = matching
        self.companies: dict[str, Company] = {}   # display name -> details
        self._by_key: dict[str, str] = {}          # normalized key -> display name

    def add(self, company: Company) -> None:
        """Register a company with detail fields (from the Companies tab)."""
        if company.name in self.companies:
            return
        self.companies[company.name] = company
        self._remember(company.name)

    def _remember(self, name: str) -> None:
        key = normalize_company_name(name)
        if key and key not in self._by_key:
            self._by_key[key] = name

    def match(self, raw_name: str) -> tuple[str, Optional[Company]]:
        """Return the display name to use for raw_name and its details, if known."""
        name = raw_name.strip()
        if not name:
            return "", None
        if name in self.companies:
            return name, self.companies[name]

        if self.matching == "normalized":
            known = self._by_key.get(normalize_company_name(name))
            if known is not None:
                if known != name:
                    logger.debug("Matched company %r to %r", name, known)
                return known, self.companies.get(known)
            self._remember(name)
        return name, None

    def __len__(self) -> int:
        return len(self.companies)


def companies_from_sheet(sheet) -> list[Company]:
    """Build Company records from a Companies sheet, skipping rows without a name."""
    resolver = ColumnResolver(sheet.headers, COMPANY_COLUMNS)
    companies = []
    for row_number, row in zip(sheet.row_numbers, sheet.rows):
        name = normalize_text(resolver.get(row, "company"))
        if not name:
            logger.warning("Companies row %d has no company name, skipped", row_number)
            continue
        companies.append(Company(
            name=name,
            website=normalize_text(resolver.get(row, "company_website")),
            show_website=normalize_text(resolver.get(row, "show_website")),
            email=normalize_text(resolver.get(row, "email")),
            phone=normalize_text(resolver.get(row, "phone")),
            address=normalize_text(resolver.get(row, "address")),
        ))
    return companies
