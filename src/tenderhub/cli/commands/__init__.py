"""CLI command modules."""

from . import applications, company, db, tenders

__all__ = [
    "applications",
    "company",
    "db",
    "tenders",
]
