"""
Session Dependency.

Provides the per-request database session for API endpoints.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orm_pitfalls.core.database import get_session

SessionDep = Annotated[AsyncSession, Depends(get_session)]
