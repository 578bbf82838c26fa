# src/whattowatch/api/v1/dependencies.py
"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from whattowatch.db.session import get_db
from whattowatch.services.catalog import CatalogClient, get_catalog_client

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_catalog_client_dep() -> CatalogClient:
    """Return the shared catalog provider client."""
    return get_catalog_client()


CatalogDep = Annotated[CatalogClient, Depends(get_catalog_client_dep)]
