"""FastAPI dependencies for database sessions and tenant scoping."""

from collections.abc import AsyncGenerator
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from muhasebi.core.context import get_current_context
from muhasebi.db.config import get_session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI to inject database sessions.

    Usage:
        @app.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_tenant_id() -> UUID:
    """Get the tenant of the current request.

    Raises:
        ContextNotSetError: If RequestContextMiddleware did not run
    """
    return get_current_context().tenant_id

