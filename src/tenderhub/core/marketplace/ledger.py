"""
Application ledger: records one application per company per tender.

The (tender, applicant) uniqueness is enforced by the store, not by a
read-then-write check, so concurrent duplicate submissions resolve to
exactly one success and one DuplicateApplicationError.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable

from sqlalchemy.orm import Session

from tenderhub.core.errors import DuplicateApplicationError, UniqueViolation, ValidationError
from tenderhub.core.identity import Identity, require_identity
from tenderhub.core.logging import get_contextual_logger
from tenderhub.core.normalize.parsing import parse_amount
from tenderhub.persistence.models import Application, Company, Tender, utcnow
from tenderhub.persistence.repo import ApplicationRepository

from .catalog import TenderCatalog
from .directory import CompanyDirectory

logger = logging.getLogger(__name__)

PAIR_CONSTRAINT = "uq_application_tender_company"


def _clean_proposal(proposal: str | None) -> str:
    text = (proposal or "").strip()
    if not text:
        raise ValidationError("Please enter a proposal", field="proposal")
    return text


class ApplicationLedger:
    """Validates and records applications against tenders."""

    def __init__(
        self,
        session: Session,
        directory: CompanyDirectory | None = None,
        catalog: TenderCatalog | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session = session
        self.clock = clock
        self.directory = directory or CompanyDirectory(session, clock=clock)
        self.catalog = catalog or TenderCatalog(session, clock=clock)
        self.applications = ApplicationRepository(session)

    def submit(
        self,
        tender_id: int,
        applicant_company_id: int,
        proposal: str,
        budget: str | float | int | Decimal | None = None,
    ) -> Application:
        """Record an application.

        The deadline is not checked: late submissions are accepted.

        Raises:
            ValidationError: Empty proposal, bad budget or unknown applicant
            NotFoundError: Unknown tender
            DuplicateApplicationError: The company already applied
        """
        text = _clean_proposal(proposal)
        amount = parse_amount(budget, field="budget")
        tender = self.catalog.require(tender_id)

        applicant = self.directory.get(applicant_company_id)
        if applicant is None:
            raise ValidationError("Please complete your company profile first", field="company")

        return self._record(tender, applicant, text, amount)

    def submit_as(
        self,
        identity: Identity | str | None,
        tender_id: int,
        proposal: str,
        budget: str | float | int | Decimal | None = None,
    ) -> Application:
        """Record an application for the company owned by `identity`.

        Raises:
            AuthenticationError: No identity
            ValidationError: Empty proposal, bad budget or no company profile
            NotFoundError: Unknown tender
            DuplicateApplicationError: The company already applied
        """
        text = _clean_proposal(proposal)
        amount = parse_amount(budget, field="budget")
        identity = require_identity(identity)
        tender = self.catalog.require(tender_id)
        applicant = self.directory.require_profile(identity)

        return self._record(tender, applicant, text, amount)

    def _record(
        self,
        tender: Tender,
        applicant: Company,
        proposal: str,
        budget: float | None,
    ) -> Application:
        log = get_contextual_logger("ledger", company_id=applicant.id, tender_id=tender.id)
        try:
            application = self.applications.create(
                tender_id=tender.id,
                applicant_company_id=applicant.id,
                proposal=proposal,
                budget=budget,
                created_at=self.clock(),
            )
        except UniqueViolation as e:
            if e.constraint not in (None, PAIR_CONSTRAINT):
                raise
            existing = self.applications.get_by_pair(tender.id, applicant.id)
            existing_id = existing.id if existing is not None else None
            log.info("Duplicate application rejected", extra={"application_id": existing_id})
            raise DuplicateApplicationError(tender.id, applicant.id, existing_id) from e

        log.info(f"Application {application.id} submitted", extra={"application_id": application.id})
        return application

    def list_for_tender(self, tender_id: int) -> list[Application]:
        """Applications received by a tender, newest first."""
        self.catalog.require(tender_id)
        return list(self.applications.list_applications(tender_id=tender_id))

    def list_by_applicant(self, company_id: int) -> list[Application]:
        """Applications a company has made, newest first."""
        return list(self.applications.list_applications(applicant_company_id=company_id))
