"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from venuin.core.database import get_db


# Session with no tenant bound: platform tables only
DBSession = Annotated[AsyncSession, Depends(get_db)]
