"""Tests for recording applications."""

from __future__ import annotations

import threading
import time
from datetime import datetime

import pytest

from tenderhub.core.errors import (
    AuthenticationError,
    DuplicateApplicationError,
    NotFoundError,
    ValidationError,
)
from tenderhub.core.marketplace import ApplicationLedger, CompanyDirectory, TenderCatalog
from tenderhub.persistence.repo import ApplicationRepository


class TestSubmit:
    def test_submit(self, ledger, tender, globex, now):
        application = ledger.submit(tender.id, globex.id, "  We can deliver in 4 weeks ", "20,000")

        assert application.id is not None
        assert application.proposal == "We can deliver in 4 weeks"
        assert application.budget == 20000.0
        assert application.created_at == now

    def test_blank_budget_is_none(self, ledger, tender, globex):
        assert ledger.submit(tender.id, globex.id, "Proposal", "  ").budget is None

    def test_zero_budget_kept(self, ledger, tender, globex):
        assert ledger.submit(tender.id, globex.id, "Proposal", 0).budget == 0.0

    def test_duplicate(self, ledger, session, tender, globex):
        first = ledger.submit(tender.id, globex.id, "First")

        with pytest.raises(DuplicateApplicationError, match="already applied") as exc_info:
            ledger.submit(tender.id, globex.id, "Second")

        assert exc_info.value.tender_id == tender.id
        assert exc_info.value.company_id == globex.id
        assert exc_info.value.application_id == first.id
        # The failed insert must not poison the surrounding transaction
        assert ApplicationRepository(session).count_for_tender(tender.id) == 1

    def test_same_company_different_tenders(self, ledger, catalog, acme, tender, globex):
        other = catalog.create(acme.id, "Second tender", "More work", "2026-12-01")
        ledger.submit(tender.id, globex.id, "One")
        ledger.submit(other.id, globex.id, "Two")
        assert len(ledger.list_by_applicant(globex.id)) == 2

    def test_late_submission_accepted(self, session, directory, catalog, tender, globex):
        later = ApplicationLedger(
            session,
            directory=directory,
            catalog=catalog,
            clock=lambda: datetime(2027, 1, 5, 9, 0),
        )
        application = later.submit(tender.id, globex.id, "Sorry we're late")
        assert application.created_at == datetime(2027, 1, 5, 9, 0)

    def test_closed_tender_accepts_applications(self, ledger, catalog, acme, tender, globex):
        catalog.close(tender.id, acme.id)
        assert ledger.submit(tender.id, globex.id, "Still interested").id is not None

    def test_blank_proposal(self, ledger, tender, globex):
        with pytest.raises(ValidationError, match="enter a proposal"):
            ledger.submit(tender.id, globex.id, "   ")

    def test_negative_budget(self, ledger, tender, globex):
        with pytest.raises(ValidationError, match="negative"):
            ledger.submit(tender.id, globex.id, "Proposal", "-100")

    def test_unknown_tender(self, ledger, globex):
        with pytest.raises(NotFoundError):
            ledger.submit(999, globex.id, "Proposal")

    def test_unknown_applicant(self, ledger, tender):
        with pytest.raises(ValidationError, match="company profile"):
            ledger.submit(tender.id, 999, "Proposal")


class TestSubmitAs:
    def test_submit_as(self, ledger, tender, globex):
        application = ledger.submit_as("bob", tender.id, "Proposal", "15000")
        assert application.applicant_company_id == globex.id

    def test_proposal_checked_first(self, ledger):
        with pytest.raises(ValidationError, match="proposal"):
            ledger.submit_as(None, 999, "")

    def test_identity_before_tender(self, ledger):
        with pytest.raises(AuthenticationError):
            ledger.submit_as(None, 999, "Proposal")

    def test_tender_before_profile(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.submit_as("nobody", 999, "Proposal")

    def test_profile_required(self, ledger, tender):
        with pytest.raises(ValidationError, match="company profile"):
            ledger.submit_as("nobody", tender.id, "Proposal")

    def test_duplicate(self, ledger, tender, globex):
        ledger.submit_as("bob", tender.id, "First")
        with pytest.raises(DuplicateApplicationError):
            ledger.submit_as("bob", tender.id, "Second")


class TestListing:
    def test_list_for_tender(self, ledger, directory, tender, globex):
        other, _ = directory.register("carol", name="Carol Ltd")
        first = ledger.submit(tender.id, globex.id, "One")
        second = ledger.submit(tender.id, other.id, "Two")

        assert [a.id for a in ledger.list_for_tender(tender.id)] == [second.id, first.id]

    def test_list_for_unknown_tender(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.list_for_tender(404)

    def test_list_by_applicant_empty(self, ledger, globex):
        assert ledger.list_by_applicant(globex.id) == []


class TestConcurrentSessions:
    @pytest.fixture
    def posted(self, file_factory, clock):
        with file_factory() as session:
            directory = CompanyDirectory(session, clock=clock)
            owner, _ = directory.register("alice", name="Acme Corp")
            bidder, _ = directory.register("bob", name="Globex")
            tender = TenderCatalog(session, clock=clock).create(
                owner.id, "Roof repair", "Fix the roof", "2026-11-01"
            )
            session.commit()
            return tender.id, bidder.id

    def submit(self, file_factory, clock, tender_id, bidder_id, proposal, hold=0.0, started=None):
        with file_factory() as session:
            try:
                application = ApplicationLedger(session, clock=clock).submit(tender_id, bidder_id, proposal)
                if started is not None:
                    started.set()
                time.sleep(hold)
                session.commit()
                return application.id
            except Exception as e:
                return e
            finally:
                if started is not None:
                    started.set()

    def test_duplicate_while_first_is_pending(self, file_factory, clock, posted):
        tender_id, bidder_id = posted
        started = threading.Event()
        results = {}

        def first():
            results["first"] = self.submit(file_factory, clock, tender_id, bidder_id, "First", hold=0.3, started=started)

        def second():
            started.wait(timeout=5)
            results["second"] = self.submit(file_factory, clock, tender_id, bidder_id, "Second")

        threads = [threading.Thread(target=first), threading.Thread(target=second)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert isinstance(results["first"], int), results
        assert isinstance(results["second"], DuplicateApplicationError), results

        with file_factory() as session:
            assert ApplicationRepository(session).count_for_tender(tender_id) == 1

    def test_simultaneous_submissions(self, file_factory, clock, posted):
        tender_id, bidder_id = posted
        workers = 4
        barrier = threading.Barrier(workers)
        results = []
        lock = threading.Lock()

        def apply(n):
            barrier.wait(timeout=5)
            outcome = self.submit(file_factory, clock, tender_id, bidder_id, f"Proposal {n}")
            with lock:
                results.append(outcome)

        threads = [threading.Thread(target=apply, args=(n,)) for n in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        successes = [r for r in results if isinstance(r, int)]
        duplicates = [r for r in results if isinstance(r, DuplicateApplicationError)]
        assert len(successes) == 1, results
        assert len(duplicates) == workers - 1, results
