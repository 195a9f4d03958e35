"""
CampusCare Backend — SQLAlchemy Repository Base
=================================================

What:  Shared plumbing for the SQLAlchemy adapters: holds the request-scoped
       session and translates driver errors into application exceptions.
How:   Adapters call `await self._flush(...)` after adding/modifying rows.
       IntegrityError is classified by the driver message:
           unique / duplicate key  → DuplicateError
           foreign key             → NotFoundError (referenced row missing)
           check constraint        → ValidationError
       Any other SQLAlchemyError becomes DatabaseError.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campuscare.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def translate_integrity_error(
    exc: IntegrityError,
    resource: str,
    unique_field: Optional[str] = None,
    duplicate_message: Optional[str] = None,
):
    """Map an IntegrityError to the matching CampusCareError instance."""
    detail = str(getattr(exc, "orig", exc)).lower()

    if "unique" in detail or "duplicate key" in detail:
        return DuplicateError(
            message=duplicate_message or f"{resource} already exists",
            field=unique_field,
            context={"resource": resource},
        )
    if "foreign key" in detail:
        return NotFoundError(resource="referenced resource", context={"while_saving": resource})
    if "check" in detail:
        return ValidationError(
            message=f"{resource} violates a value constraint",
            context={"resource": resource},
        )

    logger.error("Unclassified integrity error saving %s: %s", resource, detail)
    return DatabaseError(context={"resource": resource, "error_type": type(exc).__name__})


class SqlAlchemyRepository:
    """Base class for adapters bound to one AsyncSession."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _flush(
        self,
        resource: str,
        unique_field: Optional[str] = None,
        duplicate_message: Optional[str] = None,
    ) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise translate_integrity_error(e, resource, unique_field, duplicate_message) from e
        except SQLAlchemyError as e:
            logger.error("Database error saving %s: %s", resource, str(e), exc_info=True)
            raise DatabaseError(
                context={"resource": resource, "error_type": type(e).__name__}
            ) from e

    async def _execute(self, statement, resource: str):
        """Execute a statement; driver failures surface as DatabaseError."""
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as e:
            logger.error("Database error querying %s: %s", resource, str(e), exc_info=True)
            raise DatabaseError(
                context={"resource": resource, "error_type": type(e).__name__}
            ) from e
