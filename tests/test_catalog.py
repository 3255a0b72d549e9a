"""Tests for tender creation, listing and lifecycle."""

from __future__ import annotations

from datetime import date

import pytest

from tenderhub.core.errors import InvalidTransitionError, NotFoundError, ValidationError


def create(catalog, owner_id, **overrides):
    fields = {
        "owner_company_id": owner_id,
        "title": "Office Catering",
        "description": "Daily lunch for 40 people",
        "deadline": "2026-11-30",
    }
    fields.update(overrides)
    return catalog.create(**fields)


class TestCreate:
    def test_creates_active_tender(self, tender, acme, now):
        assert tender.id is not None
        assert tender.status == "active"
        assert tender.owner_company_id == acme.id
        assert tender.budget_min == 10000.0
        assert tender.budget_max == 50000.0
        assert tender.deadline == date(2026, 11, 18)
        assert tender.created_at == now

    def test_budget_range_ordered(self, catalog, acme):
        with pytest.raises(ValidationError, match="Minimum budget cannot exceed"):
            create(catalog, acme.id, budget_min="5000", budget_max="1000")

        tender = create(catalog, acme.id, budget_min="1000", budget_max="5000")
        assert (tender.budget_min, tender.budget_max) == (1000.0, 5000.0)

    def test_equal_bounds_allowed(self, catalog, acme):
        tender = create(catalog, acme.id, budget_min=3000, budget_max=3000)
        assert tender.budget_min == tender.budget_max == 3000.0

    def test_blank_budgets_are_absent(self, catalog, acme):
        tender = create(catalog, acme.id, budget_min="", budget_max=None)
        assert tender.budget_min is None
        assert tender.budget_max is None

    def test_negative_budget(self, catalog, acme):
        with pytest.raises(ValidationError, match="negative"):
            create(catalog, acme.id, budget_max="-1")

    def test_past_deadline(self, catalog, acme):
        with pytest.raises(ValidationError, match="past"):
            create(catalog, acme.id, deadline="2026-10-18")

    def test_deadline_today_allowed(self, catalog, acme):
        assert create(catalog, acme.id, deadline="2026-10-19").deadline == date(2026, 10, 19)

    def test_relative_deadline(self, catalog, acme):
        assert create(catalog, acme.id, deadline="in 30 days").deadline == date(2026, 11, 18)

    @pytest.mark.parametrize("field", ["title", "description"])
    def test_required_text(self, catalog, acme, field):
        with pytest.raises(ValidationError) as exc_info:
            create(catalog, acme.id, **{field: "  "})
        assert exc_info.value.field == field

    def test_title_checked_before_budget(self, catalog, acme):
        with pytest.raises(ValidationError) as exc_info:
            create(catalog, acme.id, title="", budget_min="garbage")
        assert exc_info.value.field == "title"

    def test_unknown_owner(self, catalog):
        with pytest.raises(NotFoundError):
            create(catalog, 9999)

    def test_blank_industry_stored_as_none(self, catalog, acme):
        assert create(catalog, acme.id, industry="  ").industry is None


class TestListing:
    def test_list_active_newest_first(self, catalog, acme, tender):
        newer = create(catalog, acme.id)
        assert [t.id for t in catalog.list_active()] == [newer.id, tender.id]

    def test_closed_tenders_leave_active_list(self, catalog, acme, tender):
        catalog.close(tender.id, acme.id)
        assert catalog.list_active() == []
        assert [t.id for t in catalog.list_by_owner(acme.id)] == [tender.id]

    def test_search(self, catalog, acme, globex, tender):
        create(catalog, globex.id, title="Audit services", industry="Finance")

        assert [t.id for t in catalog.search("cloud", "")] == [tender.id]
        assert [t.id for t in catalog.search("", "Technology")] == [tender.id]
        assert catalog.search("cloud", "Finance") == []
        assert len(catalog.search("", "all")) == 2
        assert [t.title for t in catalog.search("globex", None)] == ["Audit services"]

    def test_require_unknown(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.require(42)
        assert catalog.get(42) is None


class TestLifecycle:
    def test_close(self, catalog, acme, tender):
        assert catalog.close(tender.id, acme.id).status == "closed"

    def test_cancel(self, catalog, acme, tender):
        assert catalog.cancel(tender.id, acme.id).status == "cancelled"

    def test_terminal_state_is_final(self, catalog, acme, tender):
        catalog.close(tender.id, acme.id)
        with pytest.raises(InvalidTransitionError):
            catalog.cancel(tender.id, acme.id)

    def test_only_owner_can_transition(self, catalog, globex, tender):
        with pytest.raises(ValidationError, match="Only the company"):
            catalog.close(tender.id, globex.id)
        assert tender.status == "active"

    def test_owner_summary(self, catalog, acme, tender):
        other = create(catalog, acme.id)
        catalog.cancel(other.id, acme.id)

        summary = catalog.owner_summary(acme.id)
        assert (summary.total, summary.active, summary.closed, summary.cancelled) == (2, 1, 0, 1)
