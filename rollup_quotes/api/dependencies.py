"""
FastAPI dependencies for authentication, database, and service wiring.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from rollup_quotes.database.base import get_session
from rollup_quotes.services.catalog_service import CatalogService
from rollup_quotes.services.quoting import (
    QuotingService,
    SQLCatalogRepository,
    SQLQuoteStore,
)
from rollup_quotes.utils.security import AuthGate, jwt_auth_gate

# Tokens are issued by the identity provider; only verified here.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


async def get_db() -> AsyncSession:
    """Get database session dependency."""
    async for session in get_session():
        yield session


DatabaseDep = Annotated[AsyncSession, Depends(get_db)]


def get_auth_gate() -> AuthGate:
    return jwt_auth_gate


async def get_current_subject(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    gate: Annotated[AuthGate, Depends(get_auth_gate)],
) -> str:
    """
    Require an authenticated session.

    Raises:
        HTTPException: If no valid bearer token is present
    """
    if not gate.is_authenticated(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return gate.subject(token) or "unknown"


CurrentSubjectDep = Annotated[str, Depends(get_current_subject)]


async def get_quoting_service(db: DatabaseDep) -> QuotingService:
    return QuotingService(SQLCatalogRepository(db), SQLQuoteStore(db))


async def get_catalog_service(db: DatabaseDep) -> CatalogService:
    return CatalogService(SQLCatalogRepository(db))


QuotingServiceDep = Annotated[QuotingService, Depends(get_quoting_service)]
CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
