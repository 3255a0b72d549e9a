"""
SQLAlchemy ORM models for TenderHub.

Defines the complete database schema:
- Companies: Business profiles, one per owner identity
- Tenders: Calls for proposals posted by a company
- Applications: Proposals submitted by a company against a tender
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# =============================================================================
# Base Class
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all ORM models."""


# =============================================================================
# Mixins
# =============================================================================


class CreatedAtMixin:
    """Mixin providing an immutable created_at column."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
        index=True,
    )


# =============================================================================
# Company Model
# =============================================================================


class Company(Base, CreatedAtMixin):
    """Business profile owned by exactly one identity."""

    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_identity: Mapped[str] = mapped_column(String(200), nullable=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Relationships
    tenders: Mapped[list["Tender"]] = relationship(
        "Tender",
        back_populates="owner",
        order_by="Tender.created_at.desc()",
    )
    applications: Mapped[list["Application"]] = relationship(
        "Application",
        back_populates="applicant",
    )

    __table_args__ = (
        UniqueConstraint("owner_identity", name="uq_company_owner_identity"),
    )

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name='{self.name}')>"


# =============================================================================
# Tender Model
# =============================================================================


class Tender(Base, CreatedAtMixin):
    """Call for proposals posted by a company."""

    __tablename__ = "tenders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_company_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("companies.id"),
        nullable=False,
        index=True,
    )

    # Core fields
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)

    # Budget range
    budget_min: Mapped[float | None] = mapped_column(Float, nullable=True)
    budget_max: Mapped[float | None] = mapped_column(Float, nullable=True)

    deadline: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # Lifecycle (see tenderhub.core.status)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
        index=True,
    )

    # Relationships
    owner: Mapped["Company"] = relationship("Company", back_populates="tenders")
    applications: Mapped[list["Application"]] = relationship(
        "Application",
        back_populates="tender",
        order_by="Application.created_at.desc()",
    )

    __table_args__ = (
        Index("ix_tender_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Tender(id={self.id}, status='{self.status}', title='{self.title[:50]}')>"


# =============================================================================
# Application Model
# =============================================================================


class Application(Base, CreatedAtMixin):
    """Proposal from one company against another company's tender."""

    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tender_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenders.id"),
        nullable=False,
        index=True,
    )
    applicant_company_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("companies.id"),
        nullable=False,
        index=True,
    )

    proposal: Mapped[str] = mapped_column(Text, nullable=False)
    # Counter-offer; NULL means "not given", never zero
    budget: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Relationships
    tender: Mapped["Tender"] = relationship("Tender", back_populates="applications")
    applicant: Mapped["Company"] = relationship("Company", back_populates="applications")

    __table_args__ = (
        UniqueConstraint(
            "tender_id",
            "applicant_company_id",
            name="uq_application_tender_company",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Application(id={self.id}, tender_id={self.tender_id}, "
            f"applicant_company_id={self.applicant_company_id})>"
        )
