"""Database persistence layer."""

from .db import build_engine, get_engine, get_session, init_db, make_session_factory
from .models import Application, Base, Company, Tender
from .repo import ApplicationRepository, CompanyRepository, TenderRepository

__all__ = [
    "build_engine",
    "get_engine",
    "get_session",
    "init_db",
    "make_session_factory",
    "Base",
    "Company",
    "Tender",
    "Application",
    "CompanyRepository",
    "TenderRepository",
    "ApplicationRepository",
]
