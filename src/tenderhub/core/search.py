"""
Tender and company search matching.

Runs in-process over the loaded rows. If this moves into SQL the
rules must stay the same: case-insensitive substring on text, exact
case-sensitive tag on industry.
"""

from __future__ import annotations

from typing import Iterable, TYPE_CHECKING

if TYPE_CHECKING:
    from tenderhub.persistence.models import Company, Tender

ALL_INDUSTRIES = "all"


def text_matches(tender: "Tender", owner_company_name: str | None, query_text: str | None) -> bool:
    """True when the query is empty or a substring of title, description or owner name."""
    if not query_text:
        return True
    needle = query_text.lower()
    haystacks = (tender.title, tender.description, owner_company_name)
    return any(needle in (text or "").lower() for text in haystacks)


def industry_matches(row: "Tender | Company", industry_filter: str | None) -> bool:
    """True for an empty or "all" filter, otherwise exact tag equality."""
    if not industry_filter or industry_filter == ALL_INDUSTRIES:
        return True
    return row.industry == industry_filter


def matches(
    tender: "Tender",
    owner_company_name: str | None,
    query_text: str | None = "",
    industry_filter: str | None = "",
) -> bool:
    return text_matches(tender, owner_company_name, query_text) and industry_matches(
        tender, industry_filter
    )


def filter_tenders(
    tenders: Iterable["Tender"],
    query_text: str | None = "",
    industry_filter: str | None = "",
) -> list["Tender"]:
    """Keep the tenders that match, preserving order.

    Each tender's owner relationship must be loaded.
    """
    return [
        tender
        for tender in tenders
        if matches(
            tender,
            tender.owner.name if tender.owner is not None else None,
            query_text,
            industry_filter,
        )
    ]


def company_matches(
    company: "Company",
    query_text: str | None = "",
    industry_filter: str | None = "",
) -> bool:
    """Directory rules: substring on name or description, exact industry tag."""
    if query_text:
        needle = query_text.lower()
        if not any(needle in (text or "").lower() for text in (company.name, company.description)):
            return False
    return industry_matches(company, industry_filter)


def filter_companies(
    companies: Iterable["Company"],
    query_text: str | None = "",
    industry_filter: str | None = "",
) -> list["Company"]:
    return [company for company in companies if company_matches(company, query_text, industry_filter)]
