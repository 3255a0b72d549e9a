"""Shared fixtures: an in-memory marketplace with a frozen clock."""

from __future__ import annotations

from datetime import datetime

import pytest

from tenderhub.core.marketplace import ApplicationLedger, CompanyDirectory, TenderCatalog
from tenderhub.persistence.db import build_engine, make_session_factory
from tenderhub.persistence.models import Base

NOW = datetime(2026, 10, 19, 10, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = make_session_factory(engine)()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def directory(session, clock):
    return CompanyDirectory(session, clock=clock)


@pytest.fixture
def catalog(session, clock):
    return TenderCatalog(session, clock=clock)


@pytest.fixture
def ledger(session, directory, catalog, clock):
    return ApplicationLedger(session, directory=directory, catalog=catalog, clock=clock)


@pytest.fixture
def acme(directory):
    company, _ = directory.register("alice", name="Acme Corp", industry="Technology")
    return company


@pytest.fixture
def globex(directory):
    company, _ = directory.register("bob", name="Globex", industry="Finance")
    return company


@pytest.fixture
def tender(catalog, acme):
    return catalog.create(
        owner_company_id=acme.id,
        title="Cloud Infrastructure Migration",
        description="Move our on-prem workloads to a public cloud",
        deadline="2026-11-18",
        industry="Technology",
        budget_min=10000,
        budget_max=50000,
    )


@pytest.fixture
def file_factory(tmp_path):
    """Session factory on a file-backed SQLite store, for multi-session tests."""
    engine = build_engine(f"sqlite:///{tmp_path}/race.db")
    Base.metadata.create_all(bind=engine)
    yield make_session_factory(engine)
    engine.dispose()
