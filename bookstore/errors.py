"""
Constraint violation taxonomy.

The database enforces every rule of the schema; this module only gives the
errors it raises a stable shape. A violation is a caller-input error, so it is
never retried: the surrounding transaction is rolled back and the translated
exception is raised with the original DBAPI error chained as its cause.
"""

import re
from contextlib import contextmanager

from sqlalchemy.exc import DataError, IntegrityError, OperationalError

from bookstore.models import ENUM_CONSTRAINT_NAMES, metadata


class ConstraintViolation(Exception):
    """Base class for any rejected write."""

    kind = "constraint"

    def __init__(self, message, constraint=None, table=None, orig=None):
        super().__init__(message)
        self.message = message
        self.constraint = constraint
        self.table = table
        self.orig = orig

    def to_dict(self):
        return {
            "status": "error",
            "error": self.kind,
            "message": self.message,
            "constraint": self.constraint,
            "table": self.table,
        }


class UniquenessViolation(ConstraintViolation):
    kind = "uniqueness"


class CheckViolation(ConstraintViolation):
    kind = "check"


class ReferentialViolation(ConstraintViolation):
    kind = "referential"


class EnumerationViolation(ConstraintViolation):
    kind = "enumeration"


class NotNullViolation(ConstraintViolation):
    kind = "not_null"


class HierarchyCycleError(ConstraintViolation):
    """Raised before a write that would close a loop in a parent chain."""

    kind = "hierarchy_cycle"


# SQLite messages
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (?P<columns>.+)")
_SQLITE_CHECK = re.compile(r"CHECK constraint failed: (?P<name>\S+)")
_SQLITE_NOT_NULL = re.compile(r"NOT NULL constraint failed: (?P<table>\w+)\.(?P<column>\w+)")
_SQLITE_FOREIGN_KEY = "FOREIGN KEY constraint failed"

# MySQL error codes
_MYSQL_DUPLICATE = 1062
_MYSQL_NOT_NULL = (1048, 1364)
_MYSQL_FK_PARENT = 1451
_MYSQL_FK_CHILD = 1452
_MYSQL_CHECK = 3819
_MYSQL_TRUNCATED = 1265

_MYSQL_CHECK_NAME = re.compile(r"Check constraint '(?P<name>[^']+)' is violated")
_MYSQL_DUP_KEY = re.compile(r"for key '(?:(?P<table>\w+)\.)?(?P<key>[^']+)'")
_MYSQL_COLUMN = re.compile(r"(?:[Cc]olumn|Field) '(?P<column>[^']+)'")


def _error_code(orig):
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return args[0]
    return None


def constraint_table(name):
    """Name of the table that declares the named constraint, if any."""
    for table in metadata.tables.values():
        for constraint in table.constraints:
            if constraint.name is not None and str(constraint.name) == name:
                return table.name
    return None


def _check_violation(name, message, orig):
    table = constraint_table(name) if name else None
    if name in ENUM_CONSTRAINT_NAMES:
        return EnumerationViolation(message, constraint=name, table=table, orig=orig)
    return CheckViolation(message, constraint=name, table=table, orig=orig)


def translate_integrity_error(exc):
    """
    Map a SQLAlchemy DBAPI error to the matching ConstraintViolation.

    Handles the SQLite and MySQL (PyMySQL) dialects. Anything unrecognised is
    returned as a plain ConstraintViolation so the caller still gets a
    rejected-write error rather than a driver exception.
    """
    orig = getattr(exc, "orig", exc)
    message = str(orig)
    code = _error_code(orig)

    if code is not None:
        if code == _MYSQL_DUPLICATE:
            match = _MYSQL_DUP_KEY.search(message)
            return UniquenessViolation(
                message,
                constraint=match.group("key") if match else None,
                table=match.group("table") if match else None,
                orig=orig,
            )
        if code == _MYSQL_CHECK:
            match = _MYSQL_CHECK_NAME.search(message)
            return _check_violation(match.group("name") if match else None, message, orig)
        if code in (_MYSQL_FK_PARENT, _MYSQL_FK_CHILD):
            return ReferentialViolation(message, orig=orig)
        if code in _MYSQL_NOT_NULL:
            match = _MYSQL_COLUMN.search(message)
            return NotNullViolation(
                message, constraint=match.group("column") if match else None, orig=orig
            )
        if code == _MYSQL_TRUNCATED:
            # Strict mode rejects a value outside a native ENUM this way
            match = _MYSQL_COLUMN.search(message)
            column = match.group("column") if match else None
            return EnumerationViolation(message, constraint=column, orig=orig)

    match = _SQLITE_UNIQUE.search(message)
    if match:
        columns = match.group("columns")
        table = columns.split(".", 1)[0] if "." in columns else None
        return UniquenessViolation(message, constraint=columns, table=table, orig=orig)

    match = _SQLITE_CHECK.search(message)
    if match:
        return _check_violation(match.group("name"), message, orig)

    match = _SQLITE_NOT_NULL.search(message)
    if match:
        return NotNullViolation(
            message,
            constraint=f"{match.group('table')}.{match.group('column')}",
            table=match.group("table"),
            orig=orig,
        )

    if _SQLITE_FOREIGN_KEY in message:
        return ReferentialViolation(message, orig=orig)

    return ConstraintViolation(message, orig=orig)


@contextmanager
def guarded_commit(session):
    """
    Run a unit of work and commit it.

    Any integrity failure rolls back every write made inside the block and is
    re-raised as a ConstraintViolation.
    """
    try:
        yield session
        session.commit()
    except (IntegrityError, DataError) as e:
        session.rollback()
        raise translate_integrity_error(e) from e
    except OperationalError as e:
        session.rollback()
        # MySQL reports CHECK failures (3819) as OperationalError
        if _error_code(getattr(e, "orig", None)) == _MYSQL_CHECK:
            raise translate_integrity_error(e) from e
        raise
    except Exception:
        session.rollback()
        raise
