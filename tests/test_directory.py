"""Tests for company profile provisioning."""

from __future__ import annotations

import threading
import time

import pytest

from tenderhub.core.errors import AuthenticationError, ValidationError
from tenderhub.core.identity import Identity
from tenderhub.core.marketplace import CompanyDirectory
from tenderhub.persistence.models import Company
from tenderhub.persistence.repo import CompanyRepository


class TestEnsureProfile:
    def test_creates_placeholder(self, directory, now):
        company = directory.ensure_profile("alice")

        assert company.id is not None
        assert company.owner_identity == "alice"
        assert company.name == "My Company"
        assert company.industry == "Technology"
        assert company.description == "Company description"
        assert company.created_at == now

    def test_idempotent(self, directory, session):
        first = directory.ensure_profile("alice")
        second = directory.ensure_profile(Identity(subject="alice"))

        assert first.id == second.id
        assert session.query(Company).count() == 1

    def test_identity_is_stripped(self, directory):
        assert directory.ensure_profile("  alice ").id == directory.ensure_profile("alice").id

    @pytest.mark.parametrize("identity", [None, "", "   "])
    def test_requires_identity(self, directory, identity):
        with pytest.raises(AuthenticationError, match="log in"):
            directory.ensure_profile(identity)

    def test_lost_race_reads_back_winner(self, directory, session, monkeypatch):
        winner = CompanyRepository(session).create(owner_identity="carol", name="Carol Ltd")

        real_get_by_owner = directory.companies.get_by_owner
        calls = []

        def stale_then_real(owner_identity):
            calls.append(owner_identity)
            if len(calls) == 1:
                return None
            return real_get_by_owner(owner_identity)

        monkeypatch.setattr(directory.companies, "get_by_owner", stale_then_real)

        company = directory.ensure_profile("carol")

        assert company.id == winner.id
        assert company.name == "Carol Ltd"
        assert len(calls) == 2
        assert session.query(Company).count() == 1


class TestRegister:
    def test_register_new(self, directory):
        company, created = directory.register(
            "dave",
            name="  Dave's Widgets ",
            industry="Manufacturing",
            description="We make widgets",
            website=" ",
        )

        assert created is True
        assert company.name == "Dave's Widgets"
        assert company.industry == "Manufacturing"
        assert company.website is None

    def test_existing_profile_unchanged(self, directory):
        original, _ = directory.register("dave", name="Dave's Widgets")
        again, created = directory.register("dave", name="Something Else")

        assert created is False
        assert again.id == original.id
        assert again.name == "Dave's Widgets"

    def test_blank_name(self, directory):
        with pytest.raises(ValidationError, match="name is required"):
            directory.register("dave", name="   ")

    def test_requires_identity(self, directory):
        with pytest.raises(AuthenticationError):
            directory.register(None, name="Anon Inc")


class TestLookups:
    def test_require_profile_missing(self, directory):
        with pytest.raises(ValidationError, match="complete your company profile"):
            directory.require_profile("nobody")

    def test_get_by_identity_never_writes(self, directory, session):
        assert directory.get_by_identity("nobody") is None
        assert session.query(Company).count() == 0

    def test_get(self, directory, acme):
        assert directory.get(acme.id).name == "Acme Corp"
        assert directory.get(9999) is None


class TestDirectorySearch:
    @pytest.fixture
    def companies(self, directory, acme, globex):
        builder, _ = directory.register(
            "carol",
            name="BuildCraft Construction",
            industry="Construction",
            description="Commercial construction and cloud-ready offices",
        )
        return acme, globex, builder

    def test_list_ordered_by_name(self, directory, companies):
        names = [c.name for c in directory.list_companies()]
        assert names == ["Acme Corp", "BuildCraft Construction", "Globex"]

    def test_empty_directory(self, directory):
        assert directory.list_companies() == []
        assert directory.search("anything") == []

    def test_query_matches_name_and_description(self, directory, companies):
        assert [c.name for c in directory.search("GLOBEX")] == ["Globex"]
        assert [c.name for c in directory.search("cloud")] == ["BuildCraft Construction"]

    def test_industry_filter(self, directory, companies):
        assert [c.name for c in directory.search(industry="Finance")] == ["Globex"]
        assert len(directory.search(industry="all")) == 3
        assert directory.search(industry="finance") == []

    def test_query_and_industry_combined(self, directory, companies):
        assert directory.search("acme", "Finance") == []
        assert [c.name for c in directory.search("acme", "Technology")] == ["Acme Corp"]

    def test_active_tender_counts(self, directory, catalog, acme, globex, tender):
        closed = catalog.create(acme.id, "Old tender", "Done", "2026-11-01")
        catalog.close(closed.id, acme.id)
        assert directory.active_tender_counts() == {acme.id: 1}


class TestConcurrentSessions:
    def test_second_caller_waits_for_pending_insert(self, file_factory, clock):
        inserted = threading.Event()
        results = {}

        def first():
            with file_factory() as session:
                try:
                    company = CompanyDirectory(session, clock=clock).ensure_profile("alice")
                    inserted.set()
                    time.sleep(0.3)
                    session.commit()
                    results["first"] = company.id
                except Exception as e:
                    results["first"] = e
                finally:
                    inserted.set()

        def second():
            inserted.wait(timeout=5)
            with file_factory() as session:
                try:
                    company = CompanyDirectory(session, clock=clock).ensure_profile("alice")
                    session.commit()
                    results["second"] = company.id
                except Exception as e:
                    results["second"] = e

        threads = [threading.Thread(target=first), threading.Thread(target=second)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert isinstance(results["first"], int), results
        assert results["second"] == results["first"]

        with file_factory() as session:
            assert session.query(Company).count() == 1

    def test_simultaneous_first_calls(self, file_factory, clock):
        workers = 4
        barrier = threading.Barrier(workers)
        results = []
        lock = threading.Lock()

        def provision():
            barrier.wait(timeout=5)
            with file_factory() as session:
                try:
                    company = CompanyDirectory(session, clock=clock).ensure_profile("alice")
                    session.commit()
                    outcome = company.id
                except Exception as e:
                    outcome = e
            with lock:
                results.append(outcome)

        threads = [threading.Thread(target=provision) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert len(results) == workers
        assert all(isinstance(r, int) for r in results), results
        assert len(set(results)) == 1
