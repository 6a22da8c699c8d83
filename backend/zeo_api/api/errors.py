"""
Route-boundary error mapping.
Storage failures become a generic 500; nothing from the SQL layer reaches the client.
"""

from contextlib import contextmanager
from typing import Iterator, Optional
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


@contextmanager
def storage_errors(action: str, conflict: Optional[str] = None) -> Iterator[None]:
    """
    Wrap a data-layer call made while `action` ("fetching tours").
    With `conflict` set, constraint violations answer 400 with that message.
    """
    try:
        yield
    except IntegrityError as e:
        if conflict is None:
            logger.error(f"Error {action}: {e}")
            raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
        logger.warning(f"Constraint violation {action}: {e.orig}")
        raise HTTPException(status_code=400, detail=conflict)
    except SQLAlchemyError as e:
        logger.error(f"Error {action}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
