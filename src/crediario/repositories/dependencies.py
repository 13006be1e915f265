"""Dependency injection for repository layer."""

from fastapi import Depends
from sqlalchemy.orm import Session

from ..db.database import SessionLocal, get_db
from .interfaces import RepositoryContainer, UnitOfWork
from .sqlalchemy_impl import SQLAlchemyUnitOfWork, create_sqlalchemy_container


def get_repository_container(
    db: Session = Depends(get_db),
) -> RepositoryContainer:
    """
    Create and configure a repository container with SQLAlchemy implementations.

    This is the main dependency injection point for repositories. FastAPI
    caches get_db per request, so the container and the unit of work share
    one session.
    """
    return create_sqlalchemy_container(db, SessionLocal)


def get_unit_of_work(db: Session = Depends(get_db)) -> UnitOfWork:
    """Get the unit of work committing the request's session."""
    return SQLAlchemyUnitOfWork(db)
