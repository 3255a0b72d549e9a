"""A full marketplace round trip against one store."""

from __future__ import annotations

from datetime import timedelta

import pytest

from tenderhub.core.errors import DuplicateApplicationError
from tenderhub.core.normalize import days_until, format_range


def test_post_browse_apply(directory, catalog, ledger, now):
    company_a, _ = directory.register("alice", name="Acme Corp", industry="Technology")
    tender = catalog.create(
        owner_company_id=company_a.id,
        title="Cloud Infrastructure Migration",
        description="We need a partner to deliver a migration to the cloud",
        deadline=now + timedelta(days=30),
        industry="Technology",
        budget_min=10000,
        budget_max=50000,
    )

    assert tender.status == "active"
    assert [t.id for t in catalog.list_active()] == [tender.id]
    assert format_range(tender.budget_min, tender.budget_max) == "$10,000–$50,000"
    assert days_until(tender.deadline, now) == 30

    company_b = directory.ensure_profile("bob")
    ledger.submit(tender.id, company_b.id, "We can deliver in 4 weeks", 20000)

    with pytest.raises(DuplicateApplicationError):
        ledger.submit(tender.id, company_b.id, "We can deliver in 3 weeks", 18000)

    found = catalog.search("deliver", "Technology")
    assert [t.id for t in found] == [tender.id]

    received = ledger.list_for_tender(tender.id)
    assert len(received) == 1
    assert received[0].applicant.name == "My Company"
    assert received[0].budget == 20000.0


def test_commit_and_reopen(engine, clock):
    from tenderhub.core.marketplace import ApplicationLedger, CompanyDirectory, TenderCatalog
    from tenderhub.persistence.db import make_session_factory

    factory = make_session_factory(engine)

    with factory() as session:
        owner = CompanyDirectory(session, clock=clock).ensure_profile("alice")
        bidder = CompanyDirectory(session, clock=clock).ensure_profile("bob")
        tender = TenderCatalog(session, clock=clock).create(owner.id, "Roof repair", "Fix the roof", "2026-11-01")
        ApplicationLedger(session, clock=clock).submit(tender.id, bidder.id, "We fix roofs")
        session.commit()
        tender_id, bidder_id = tender.id, bidder.id

    with factory() as session:
        ledger = ApplicationLedger(session, clock=clock)
        with pytest.raises(DuplicateApplicationError):
            ledger.submit(tender_id, bidder_id, "Again")
        session.rollback()
        assert len(ledger.list_for_tender(tender_id)) == 1
