"""
Company directory: one company profile per identity.

ensure_profile is the only self-healing operation in the core. It inserts
a placeholder profile when none exists and, if a concurrent caller wins
the insert, reads back the winner's row instead of failing.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.orm import Session

from tenderhub.core.config.models import MarketplaceConfig
from tenderhub.core.errors import StoreError, UniqueViolation, ValidationError
from tenderhub.core.identity import Identity, require_identity
from tenderhub.core.normalize.parsing import clean_optional
from tenderhub.core.search import filter_companies
from tenderhub.core.status import TenderStatus
from tenderhub.persistence.models import Company, utcnow
from tenderhub.persistence.repo import CompanyRepository, TenderRepository

logger = logging.getLogger(__name__)

OWNER_CONSTRAINT = "uq_company_owner_identity"


class CompanyDirectory:
    """Owns company-profile identity."""

    def __init__(
        self,
        session: Session,
        config: MarketplaceConfig | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session = session
        self.config = config or MarketplaceConfig()
        self.clock = clock
        self.companies = CompanyRepository(session)

    def get(self, company_id: int) -> Company | None:
        return self.companies.get_by_id(company_id)

    def get_by_identity(self, identity: Identity | str | None) -> Company | None:
        """Look up the profile owned by an identity. Never writes."""
        identity = require_identity(identity)
        return self.companies.get_by_owner(identity.subject)

    def require_profile(self, identity: Identity | str | None) -> Company:
        """Profile for an identity, or ValidationError if it was never created."""
        company = self.get_by_identity(identity)
        if company is None:
            raise ValidationError("Please complete your company profile first", field="company")
        return company

    def list_companies(self) -> list[Company]:
        """Every registered company, ordered by name."""
        return list(self.companies.get_all())

    def search(self, query: str | None = "", industry: str | None = "") -> list[Company]:
        """Companies narrowed by text on name or description and by industry tag."""
        return filter_companies(self.list_companies(), query, industry)

    def active_tender_counts(self) -> dict[int, int]:
        """Active tenders per company id. Companies with none are absent."""
        return TenderRepository(self.session).count_by_owner(status=TenderStatus.ACTIVE.value)

    def ensure_profile(self, identity: Identity | str | None) -> Company:
        """Return the identity's profile, creating a placeholder one if absent.

        Idempotent: repeated and concurrent first calls resolve to the
        same row.

        Raises:
            AuthenticationError: identity is missing or blank
        """
        identity = require_identity(identity)

        existing = self.companies.get_by_owner(identity.subject)
        if existing is not None:
            return existing

        company, created = self._create_or_fetch(
            identity,
            name=self.config.placeholder_company_name,
            industry=self.config.placeholder_industry,
            description=self.config.placeholder_description,
        )
        if created:
            logger.info(
                f"Provisioned placeholder company profile {company.id}",
                extra={"identity": identity.subject, "company_id": company.id},
            )
        return company

    def register(
        self,
        identity: Identity | str | None,
        name: str,
        industry: str | None = None,
        description: str | None = None,
        website: str | None = None,
    ) -> tuple[Company, bool]:
        """Create a profile with explicit details.

        An existing profile is returned unchanged; editing profiles is not
        part of the directory.

        Returns:
            Tuple of (company, created) where created is True if new
        """
        identity = require_identity(identity)

        name = (name or "").strip()
        if not name:
            raise ValidationError("Company name is required", field="name")

        existing = self.companies.get_by_owner(identity.subject)
        if existing is not None:
            return existing, False

        company, created = self._create_or_fetch(
            identity,
            name=name,
            industry=clean_optional(industry),
            description=(description or "").strip(),
            website=clean_optional(website),
        )
        if created:
            logger.info(f"Registered company '{company.name}' ({company.id}) for {identity.subject}")
        return company, created

    def _create_or_fetch(self, identity: Identity, **fields: str | None) -> tuple[Company, bool]:
        try:
            company = self.companies.create(
                owner_identity=identity.subject,
                created_at=self.clock(),
                **fields,
            )
            return company, True
        except UniqueViolation as e:
            if e.constraint not in (None, OWNER_CONSTRAINT):
                raise

        # Lost the race: another caller inserted the profile first
        logger.info(f"Company profile for {identity.subject} created concurrently, reusing it")
        winner = self.companies.get_by_owner(identity.subject)
        if winner is None:
            raise StoreError(f"Company profile for {identity.subject} vanished after unique violation")
        return winner, False
