"""
Transaction boundary for the service layer.

    with unit_of_work(db):
        ...  # flushes, ledger writes, inventory updates

- no exception -> commit
- exception    -> rollback, the exception keeps propagating
- nested use on the same session only flushes; the outermost block owns
  the commit/rollback, so a movement and its inventory effects stay atomic.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from warehouse_api.core.exceptions import ConflictError, InvalidStateError

logger = logging.getLogger(__name__)

_DEPTH_KEY = "warehouse_api.uow_depth"


def _translate(exc: Exception) -> ConflictError:
    if isinstance(exc, StaleDataError):
        return InvalidStateError("Record was modified concurrently, retry the operation")
    return ConflictError("Record conflicts with existing data")


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    depth = db.info.get(_DEPTH_KEY, 0)
    db.info[_DEPTH_KEY] = depth + 1
    try:
        yield db
        if depth == 0:
            db.commit()
        else:
            db.flush()
    except (StaleDataError, IntegrityError) as exc:
        if depth == 0:
            db.rollback()
        logger.warning("Unit of work aborted: %s", exc)
        raise _translate(exc) from exc
    except Exception:
        if depth == 0:
            db.rollback()
        raise
    finally:
        db.info[_DEPTH_KEY] = depth


__all__ = ["unit_of_work"]
