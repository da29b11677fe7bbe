"""Risk score models: current scores, score history and risk alerts."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from uuid_utils.compat import uuid7

from .base import Base, PortableJSON, PortableUUID, TimestampMixin, UTCDateTime, utcnow


class RiskEntityType(str, Enum):
    """Kind of entity a risk score is attached to."""

    DOCUMENT = "document"
    COMPANY = "company"


class RiskSeverity(str, Enum):
    """Coarse risk bucket derived from a numeric score.

    Alerts additionally use "critical"; score severities never do.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskScoreHistory(Base):
    """Append-only ledger of risk score observations.

    One row per (re)computation of a document or client company score.
    Rows are never updated or deleted by the application.
    """

    __tablename__ = "risk_score_history"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid7)
    tenant_id: Mapped[UUID] = mapped_column(PortableUUID(), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[UUID] = mapped_column(PortableUUID(), nullable=False)
    score: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_risk_history_entity", "tenant_id", "entity_type", "entity_id", "recorded_at"),
        Index("idx_risk_history_scope", "tenant_id", "entity_type", "recorded_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<RiskScoreHistory(entity={self.entity_type}:{self.entity_id}, "
            f"score={self.score}, recorded_at={self.recorded_at})>"
        )


class DocumentRiskScore(Base, TimestampMixin):
    """Live pointer to the latest risk score of a document.

    Maintained by the risk computation pipeline; one row per document.
    """

    __tablename__ = "document_risk_scores"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid7)
    tenant_id: Mapped[UUID] = mapped_column(PortableUUID(), nullable=False)
    document_id: Mapped[UUID] = mapped_column(PortableUUID(), nullable=False, unique=True)
    score: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False)
    triggered_rule_codes: Mapped[list] = mapped_column(PortableJSON(), nullable=False, default=list)
    generated_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_document_risk_tenant", "tenant_id"),
        Index("idx_document_risk_severity", "severity"),
    )

    def __repr__(self) -> str:
        return f"<DocumentRiskScore(document={self.document_id}, score={self.score})>"


class ClientCompanyRiskScore(Base, TimestampMixin):
    """Risk score computed for a client company.

    Companies are scored afresh on every run, so this table holds one row
    per computation rather than a single live pointer.
    """

    __tablename__ = "client_company_risk_scores"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid7)
    tenant_id: Mapped[UUID] = mapped_column(PortableUUID(), nullable=False)
    client_company_id: Mapped[UUID] = mapped_column(PortableUUID(), nullable=False)
    score: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False)
    triggered_rule_codes: Mapped[list] = mapped_column(PortableJSON(), nullable=False, default=list)
    generated_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_company_risk_tenant_company", "tenant_id", "client_company_id", "generated_at"),
        Index("idx_company_risk_severity", "severity"),
    )

    def __repr__(self) -> str:
        return f"<ClientCompanyRiskScore(company={self.client_company_id}, score={self.score})>"


class RiskAlert(Base, TimestampMixin):
    """Risk alert raised for a document or client company.

    Alerts are written by the alerting workflow; this package only reads them.
    """

    __tablename__ = "risk_alerts"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid7)
    tenant_id: Mapped[UUID] = mapped_column(PortableUUID(), nullable=False)
    client_company_id: Mapped[UUID | None] = mapped_column(PortableUUID(), nullable=True)
    document_id: Mapped[UUID | None] = mapped_column(PortableUUID(), nullable=True)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False)  # low/medium/high/critical
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="open")

    __table_args__ = (Index("idx_risk_alert_tenant_created", "tenant_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<RiskAlert(id={self.id}, type={self.type}, severity={self.severity})>"
