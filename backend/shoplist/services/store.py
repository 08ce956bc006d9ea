"""
Guards around store round trips.

Reads degrade to an empty result when the store is unreachable; writes roll
back and surface a retryable TransportError so the caller's previous state
stays authoritative.
"""

import logging
from contextlib import contextmanager
from typing import Callable, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from shoplist.exceptions import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def soft_read(db: Session, action: str, query: Callable[[], T], default: Callable[[], T] = list) -> T:
    """Run `query()`; on transport failure log and return `default()`."""
    try:
        return query()
    except IntegrityError:
        raise
    except DBAPIError as e:
        db.rollback()
        logger.warning(f"{action} failed, returning empty result: {e}")
        return default()


def strict_read(db: Session, action: str, query: Callable[[], T]) -> T:
    """Read that a write depends on: transport failures surface instead of degrading."""
    try:
        return query()
    except IntegrityError:
        raise
    except DBAPIError as e:
        db.rollback()
        logger.error(f"Could not {action}: {e}")
        raise TransportError(f"Could not {action}, please retry") from e


@contextmanager
def write_step(db: Session, action: str):
    """
    One independently failable write, committed on success.

    IntegrityError is a constraint violation, not a transport failure, and
    propagates untouched after the rollback.
    """
    try:
        yield
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except DBAPIError as e:
        db.rollback()
        logger.error(f"Could not {action}: {e}")
        raise TransportError(f"Could not {action}, please retry") from e
    except Exception:
        db.rollback()
        raise
