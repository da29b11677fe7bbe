"""Database repositories for clean data access."""

from .base import BaseRepository
from .risk_alert import RiskAlertRepository
from .risk_history import RiskScoreHistoryRepository
from .risk_score import ClientCompanyRiskScoreRepository, DocumentRiskScoreRepository
from .subscription import TenantSubscriptionRepository
from .usage import TenantUsageRepository

__all__ = [
    "BaseRepository",
    "ClientCompanyRiskScoreRepository",
    "DocumentRiskScoreRepository",
    "RiskAlertRepository",
    "RiskScoreHistoryRepository",
    "TenantSubscriptionRepository",
    "TenantUsageRepository",
]
