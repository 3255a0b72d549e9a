"""
Repository pattern for database operations.

Provides clean abstractions over the store: filtered ordered reads,
equality lookups, and single-row inserts. Inserts run inside a SAVEPOINT
so a unique-key clash rolls back only the failed row and surfaces as
UniqueViolation instead of poisoning the caller's transaction.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from .db import store_errors
from .models import Application, Company, Tender


def _insert(session: Session, row: Company | Tender | Application) -> None:
    """Insert a single row atomically, translating store failures."""
    with store_errors():
        with session.begin_nested():
            session.add(row)
            session.flush()


# =============================================================================
# Company Repository
# =============================================================================


class CompanyRepository:
    """Repository for Company profiles."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, company_id: int) -> Company | None:
        """Get company by ID."""
        with store_errors():
            return self.session.get(Company, company_id)

    def get_by_owner(self, owner_identity: str) -> Company | None:
        """Get company by its unique owner identity."""
        stmt = select(Company).where(Company.owner_identity == owner_identity)
        with store_errors():
            return self.session.execute(stmt).scalar_one_or_none()

    def create(
        self,
        owner_identity: str,
        name: str,
        industry: str | None = None,
        description: str = "",
        website: str | None = None,
        created_at: datetime | None = None,
    ) -> Company:
        """Insert a new company.

        Raises:
            UniqueViolation: A company already exists for owner_identity
        """
        company = Company(
            owner_identity=owner_identity,
            name=name,
            industry=industry,
            description=description,
            website=website,
        )
        if created_at is not None:
            company.created_at = created_at
        _insert(self.session, company)
        return company

    def get_all(self) -> Sequence[Company]:
        """Get all companies ordered by name."""
        stmt = select(Company).order_by(Company.name, Company.id)
        with store_errors():
            return self.session.execute(stmt).scalars().all()

    def count(self) -> int:
        """Number of registered companies."""
        stmt = select(func.count(Company.id))
        with store_errors():
            return int(self.session.execute(stmt).scalar_one())


# =============================================================================
# Tender Repository
# =============================================================================


class TenderRepository:
    """Repository for Tender reads and inserts."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, tender_id: int) -> Tender | None:
        """Get tender by ID."""
        with store_errors():
            return self.session.get(Tender, tender_id)

    def create(
        self,
        owner_company_id: int,
        title: str,
        description: str,
        deadline: date,
        status: str,
        industry: str | None = None,
        budget_min: float | None = None,
        budget_max: float | None = None,
        created_at: datetime | None = None,
    ) -> Tender:
        """Insert a new tender."""
        tender = Tender(
            owner_company_id=owner_company_id,
            title=title,
            description=description,
            deadline=deadline,
            status=status,
            industry=industry,
            budget_min=budget_min,
            budget_max=budget_max,
        )
        if created_at is not None:
            tender.created_at = created_at
        _insert(self.session, tender)
        return tender

    def list_tenders(
        self,
        status: str | None = None,
        owner_company_id: int | None = None,
    ) -> Sequence[Tender]:
        """List tenders newest first, with owning company loaded."""
        stmt = select(Tender).options(selectinload(Tender.owner))

        if status is not None:
            stmt = stmt.where(Tender.status == status)
        if owner_company_id is not None:
            stmt = stmt.where(Tender.owner_company_id == owner_company_id)

        stmt = stmt.order_by(Tender.created_at.desc(), Tender.id.desc())

        with store_errors():
            return self.session.execute(stmt).scalars().all()

    def update_status(self, tender: Tender, status: str) -> Tender:
        """Persist a new status on an existing tender."""
        with store_errors():
            tender.status = status
            self.session.flush()
        return tender

    def count_by_status(self, owner_company_id: int | None = None) -> dict[str, int]:
        """Count tenders grouped by status."""
        stmt = select(
            Tender.status,
            func.count(Tender.id),
        ).group_by(Tender.status)

        if owner_company_id is not None:
            stmt = stmt.where(Tender.owner_company_id == owner_company_id)

        with store_errors():
            result = self.session.execute(stmt).all()
        return {status: count for status, count in result}

    def count_by_owner(self, status: str | None = None) -> dict[int, int]:
        """Count tenders per owning company, optionally for one status."""
        stmt = select(
            Tender.owner_company_id,
            func.count(Tender.id),
        ).group_by(Tender.owner_company_id)

        if status is not None:
            stmt = stmt.where(Tender.status == status)

        with store_errors():
            result = self.session.execute(stmt).all()
        return {company_id: count for company_id, count in result}


# =============================================================================
# Application Repository
# =============================================================================


class ApplicationRepository:
    """Repository for Application inserts and reads."""

    def __init__(self, session: Session):
        self.session = session

    def create(
        self,
        tender_id: int,
        applicant_company_id: int,
        proposal: str,
        budget: float | None = None,
        created_at: datetime | None = None,
    ) -> Application:
        """Insert a new application.

        Raises:
            UniqueViolation: The company already applied to this tender
        """
        application = Application(
            tender_id=tender_id,
            applicant_company_id=applicant_company_id,
            proposal=proposal,
            budget=budget,
        )
        if created_at is not None:
            application.created_at = created_at
        _insert(self.session, application)
        return application

    def get_by_pair(self, tender_id: int, applicant_company_id: int) -> Application | None:
        """Get the application a company made to a tender, if any."""
        stmt = select(Application).where(
            Application.tender_id == tender_id,
            Application.applicant_company_id == applicant_company_id,
        )
        with store_errors():
            return self.session.execute(stmt).scalar_one_or_none()

    def list_applications(
        self,
        tender_id: int | None = None,
        applicant_company_id: int | None = None,
    ) -> Sequence[Application]:
        """List applications newest first."""
        stmt = select(Application).options(
            selectinload(Application.applicant),
            selectinload(Application.tender),
        )

        if tender_id is not None:
            stmt = stmt.where(Application.tender_id == tender_id)
        if applicant_company_id is not None:
            stmt = stmt.where(Application.applicant_company_id == applicant_company_id)

        stmt = stmt.order_by(Application.created_at.desc(), Application.id.desc())

        with store_errors():
            return self.session.execute(stmt).scalars().all()

    def count_for_tender(self, tender_id: int) -> int:
        """Number of applications received by a tender."""
        stmt = select(func.count(Application.id)).where(Application.tender_id == tender_id)
        with store_errors():
            return int(self.session.execute(stmt).scalar_one())
