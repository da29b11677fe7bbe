"""Repositories for current document and client company risk scores."""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import select

from muhasebi.db.models.base import utcnow
from muhasebi.db.models.risk import ClientCompanyRiskScore, DocumentRiskScore, RiskSeverity
from muhasebi.db.repositories.base import BaseRepository


class DocumentRiskScoreRepository(BaseRepository[DocumentRiskScore, UUID]):
    """Repository for the live document risk score pointer."""

    model = DocumentRiskScore

    async def get_by_document(self, tenant_id: UUID, document_id: UUID) -> DocumentRiskScore | None:
        """Get the current score record of a document.

        Args:
            tenant_id: Owning tenant
            document_id: Document to look up

        Returns:
            The score record or None if the document was never scored
        """
        stmt = (
            select(DocumentRiskScore)
            .where(DocumentRiskScore.tenant_id == tenant_id)
            .where(DocumentRiskScore.document_id == document_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        tenant_id: UUID,
        document_id: UUID,
        score: float,
        severity: RiskSeverity,
        *,
        triggered_rule_codes: Sequence[str] = (),
        generated_at: datetime | None = None,
    ) -> DocumentRiskScore:
        """Create or replace the current score of a document."""
        generated_at = generated_at or utcnow()
        existing = await self.get_by_document(tenant_id, document_id)
        if existing is not None:
            return await self.update(
                existing,
                {
                    "score": score,
                    "severity": severity.value,
                    "triggered_rule_codes": list(triggered_rule_codes),
                    "generated_at": generated_at,
                },
            )

        return await self.create(
            DocumentRiskScore(
                tenant_id=tenant_id,
                document_id=document_id,
                score=score,
                severity=severity.value,
                triggered_rule_codes=list(triggered_rule_codes),
                generated_at=generated_at,
            )
        )


class ClientCompanyRiskScoreRepository(BaseRepository[ClientCompanyRiskScore, UUID]):
    """Repository for client company risk score computations."""

    model = ClientCompanyRiskScore

    async def list_since(
        self,
        tenant_id: UUID,
        client_company_id: UUID,
        since: datetime,
    ) -> list[ClientCompanyRiskScore]:
        """Get a company's scores generated at or after `since`, oldest first."""
        stmt = (
            select(ClientCompanyRiskScore)
            .where(ClientCompanyRiskScore.tenant_id == tenant_id)
            .where(ClientCompanyRiskScore.client_company_id == client_company_id)
            .where(ClientCompanyRiskScore.generated_at >= since)
            .order_by(ClientCompanyRiskScore.generated_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
