"""
Module: closing_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.
    Selectors are the read side of the kernel: process catalog, closing
    calendar, and execution history.
Architecture position: Kernel > Selectors.  May import from db/, models/,
    domain/dtos and exceptions.  MUST NOT import from services/ or outer
    layers.  Selectors NEVER create, modify, or delete data.

Invariants enforced:
    - Read-only access: Selectors accept a Session from the caller but MUST NOT
      call session.add(), session.delete(), session.commit(), or session.flush().
    - DTO return convention: Selectors return frozen dataclasses, NOT raw ORM
      model instances.
    - Fresh reads: nothing is cached between calls; every call queries the
      backend, so reference data edits are visible immediately.

Failure modes:
    - InfrastructureError wrapping any SQLAlchemyError raised while reading.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from closing_kernel.exceptions import InfrastructureError
from closing_kernel.logging_config import get_logger

logger = get_logger("selectors")


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session from the caller, perform read-only queries,
        and return DTOs.  They MUST NOT mutate any data.
    """

    def __init__(self, session: Session):
        """
        Initialize the selector.

        Args:
            session: SQLAlchemy session for database operations.
        """
        self.session = session

    @contextmanager
    def _backend_read(self, operation: str) -> Iterator[None]:
        """Translate driver/ORM failures on a read path into InfrastructureError."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error(
                "backend_read_failed",
                extra={"operation": operation, "error": str(exc)},
            )
            raise InfrastructureError(operation, str(exc)) from exc
