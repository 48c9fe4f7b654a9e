"""
Translation of driver-level integrity errors into the domain taxonomy.

SQLite reports constraint failures through its extended error name
(Python 3.11+) and a stable message prefix; PostgreSQL drivers expose
the SQLSTATE code and a ``Key (col)=(value)`` detail line.
"""
import re
from contextlib import contextmanager
from typing import Iterator, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from domain.errors import (
    ForeignKeyViolationError,
    PersistenceError,
    UnclassifiedPersistenceError,
    UniqueConstraintError,
)

PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"

SQLITE_UNIQUE = "SQLITE_CONSTRAINT_UNIQUE"
SQLITE_FOREIGN_KEY = "SQLITE_CONSTRAINT_FOREIGNKEY"

_SQLITE_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: (?P<columns>.+)$")
_PG_KEY_RE = re.compile(r"Key \((?P<columns>[^)]+)\)=")


def _driver_code(orig: BaseException) -> str:
    for attr in ("sqlite_errorname", "sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    return ""


def _unique_fields(orig: BaseException) -> List[str]:
    message = str(orig).strip()
    match = _SQLITE_UNIQUE_RE.search(message)
    if match:
        # "alocacoes_cliente.cliente_id, alocacoes_cliente.acao_id"
        return [col.strip().split(".")[-1] for col in match.group("columns").split(",")]

    diag = getattr(orig, "diag", None)
    detail = getattr(diag, "message_detail", None) or message
    match = _PG_KEY_RE.search(detail)
    if match:
        return [col.strip().strip('"') for col in match.group("columns").split(",")]
    return []


def classify_integrity_error(exc: IntegrityError) -> PersistenceError:
    """Map an IntegrityError to UniqueConstraintError, ForeignKeyViolationError or unclassified."""
    orig = exc.orig if exc.orig is not None else exc
    code = _driver_code(orig)
    message = str(orig)

    if code in (SQLITE_UNIQUE, PG_UNIQUE_VIOLATION) or message.startswith("UNIQUE constraint failed"):
        return UniqueConstraintError(_unique_fields(orig))
    if code in (SQLITE_FOREIGN_KEY, PG_FOREIGN_KEY_VIOLATION) or message.startswith("FOREIGN KEY constraint failed"):
        return ForeignKeyViolationError(message)
    return UnclassifiedPersistenceError(message)


def classify_error(exc: SQLAlchemyError) -> PersistenceError:
    if isinstance(exc, IntegrityError):
        return classify_integrity_error(exc)
    return UnclassifiedPersistenceError(str(exc))


@contextmanager
def persistence_errors(session: Session) -> Iterator[None]:
    """Roll back and re-raise any SQLAlchemy failure as a domain error."""
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        raise classify_error(exc) from exc
