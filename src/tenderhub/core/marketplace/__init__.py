"""Marketplace services: company directory, tender catalog, application ledger."""

from .catalog import TenderCatalog, TenderSummary
from .directory import CompanyDirectory
from .ledger import ApplicationLedger

__all__ = [
    "ApplicationLedger",
    "CompanyDirectory",
    "TenderCatalog",
    "TenderSummary",
]
