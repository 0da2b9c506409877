"""
Transactional scope for the core

``atomic()`` wraps one unit of work on the SQLAlchemy session: commit on
success, roll back on any exception. Database faults surface as
PersistenceError with the driver error chained as ``__cause__``.
"""

from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from rigasset import db
from rigasset.business.core.errors import PersistenceError


@contextmanager
def atomic(session=None):
    session = session or db.session
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceError(f"Database error: {e.__class__.__name__}") from e
    except Exception:
        session.rollback()
        raise
