"""
Tender catalog: create, list, search and close tenders.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from sqlalchemy.orm import Session

from tenderhub.core import status as status_machine
from tenderhub.core.errors import NotFoundError, ValidationError
from tenderhub.core.logging import get_contextual_logger
from tenderhub.core.normalize.parsing import clean_optional, parse_amount, parse_deadline
from tenderhub.core.search import filter_tenders
from tenderhub.core.status import INITIAL_STATUS, TenderStatus
from tenderhub.persistence.models import Tender, utcnow
from tenderhub.persistence.repo import CompanyRepository, TenderRepository

logger = logging.getLogger(__name__)

Amount = str | float | int | Decimal | None


@dataclass
class TenderSummary:
    """Tender counts for one company's dashboard."""

    total: int = 0
    active: int = 0
    closed: int = 0
    cancelled: int = 0


class TenderCatalog:
    """Creates and lists tenders."""

    def __init__(
        self,
        session: Session,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session = session
        self.clock = clock
        self.tenders = TenderRepository(session)
        self.companies = CompanyRepository(session)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(
        self,
        owner_company_id: int,
        title: str,
        description: str,
        deadline: date | datetime | str,
        industry: str | None = None,
        budget_min: Amount = None,
        budget_max: Amount = None,
    ) -> Tender:
        """Publish a new active tender.

        Validation runs before any write, in this order: title and
        description present, budgets non-negative and ordered, deadline
        not in the past, owner company exists.

        Raises:
            ValidationError: Bad input
            NotFoundError: Owner company does not exist
        """
        title = (title or "").strip()
        description = (description or "").strip()
        if not title:
            raise ValidationError("Title is required", field="title")
        if not description:
            raise ValidationError("Description is required", field="description")

        low = parse_amount(budget_min, field="budget_min")
        high = parse_amount(budget_max, field="budget_max")
        if low is not None and high is not None and low > high:
            raise ValidationError(
                "Minimum budget cannot exceed maximum budget",
                field="budget_min",
            )

        now = self.clock()
        due = parse_deadline(deadline, relative_base=now)
        if due < now.date():
            raise ValidationError("Deadline cannot be in the past", field="deadline")

        if self.companies.get_by_id(owner_company_id) is None:
            raise NotFoundError("Company", owner_company_id)

        tender = self.tenders.create(
            owner_company_id=owner_company_id,
            title=title,
            description=description,
            deadline=due,
            status=INITIAL_STATUS.value,
            industry=clean_optional(industry),
            budget_min=low,
            budget_max=high,
            created_at=now,
        )
        get_contextual_logger("catalog", company_id=owner_company_id, tender_id=tender.id).info(
            f"Tender created: {tender.title}"
        )
        return tender

    def transition(
        self,
        tender_id: int,
        owner_company_id: int,
        target: str | TenderStatus,
    ) -> Tender:
        """Move a tender to a new status on behalf of its owner.

        Raises:
            NotFoundError: Unknown tender
            ValidationError: Caller does not own the tender
            InvalidTransitionError: Status change not allowed
        """
        tender = self.require(tender_id)
        if tender.owner_company_id != owner_company_id:
            raise ValidationError(
                "Only the company that posted a tender can change its status",
                field="owner_company_id",
            )

        previous = tender.status
        new_status = status_machine.transition(previous, target)
        self.tenders.update_status(tender, new_status.value)
        get_contextual_logger("catalog", company_id=owner_company_id, tender_id=tender.id).info(
            f"Tender status {previous} -> {new_status.value}"
        )
        return tender

    def close(self, tender_id: int, owner_company_id: int) -> Tender:
        return self.transition(tender_id, owner_company_id, TenderStatus.CLOSED)

    def cancel(self, tender_id: int, owner_company_id: int) -> Tender:
        return self.transition(tender_id, owner_company_id, TenderStatus.CANCELLED)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, tender_id: int) -> Tender | None:
        return self.tenders.get_by_id(tender_id)

    def require(self, tender_id: int) -> Tender:
        tender = self.tenders.get_by_id(tender_id)
        if tender is None:
            raise NotFoundError("Tender", tender_id)
        return tender

    def list_active(self) -> list[Tender]:
        """Active tenders, newest first, with owner company loaded."""
        return list(self.tenders.list_tenders(status=TenderStatus.ACTIVE.value))

    def list_by_owner(self, company_id: int) -> list[Tender]:
        """All of a company's tenders regardless of status, newest first."""
        return list(self.tenders.list_tenders(owner_company_id=company_id))

    def search(self, query: str | None = "", industry: str | None = "") -> list[Tender]:
        """Active tenders narrowed by text query and industry tag."""
        return filter_tenders(self.list_active(), query, industry)

    def owner_summary(self, company_id: int) -> TenderSummary:
        counts = self.tenders.count_by_status(owner_company_id=company_id)
        return TenderSummary(
            total=sum(counts.values()),
            active=counts.get(TenderStatus.ACTIVE.value, 0),
            closed=counts.get(TenderStatus.CLOSED.value, 0),
            cancelled=counts.get(TenderStatus.CANCELLED.value, 0),
        )
