# Bulk load / export of the book catalog as delimited text

import csv
from datetime import date, datetime
from decimal import Decimal
from itertools import groupby

import pandas as pd
from flask import current_app
from sqlalchemy import Boolean, Date, DateTime, Integer, Numeric, String, insert, select

from bookstore.errors import guarded_commit
from bookstore.extensions import db
from bookstore.models import Book

BOOK_COLUMNS = [column.name for column in Book.__table__.columns]

DELIMITER = ","
QUOTECHAR = '"'
LINE_TERMINATOR = "\n"
# Same NULL marker as MySQL LOAD DATA; a quoted "" stays an empty string
NULL_MARKER = "\\N"

_TRUE_STRINGS = {"true", "1", "t", "yes", "y"}
_FALSE_STRINGS = {"false", "0", "f", "no", "n"}


def _to_text(value):
    if value is None:
        return None
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _from_text(column, raw):
    """Coerce one delimited-text field back to the column's Python type."""
    if raw is None or pd.isna(raw):
        return None

    value = str(raw)
    column_type = column.type

    if isinstance(column_type, String):
        return value
    if value == "":
        return None

    if isinstance(column_type, Boolean):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"Invalid boolean for {column.name}: {value!r}")
    if isinstance(column_type, Integer):
        return int(value)
    if isinstance(column_type, Numeric):
        return Decimal(value)
    if isinstance(column_type, DateTime):
        return datetime.fromisoformat(value)
    if isinstance(column_type, Date):
        return date.fromisoformat(value)
    return value


def books_dataframe():
    """All Book rows as a DataFrame of text values, ordered by book_id."""
    rows = db.session.execute(select(Book.__table__).order_by(Book.book_id)).mappings().all()
    records = [{name: _to_text(row[name]) for name in BOOK_COLUMNS} for row in rows]
    return pd.DataFrame(records, columns=BOOK_COLUMNS, dtype=object)


def export_books(output_file, include_header=True):
    """
    Export every Book row to comma-separated, quote-enclosed text.

    Args:
        output_file: Path or writable text buffer.
        include_header: Write the column names as the first line.

    Returns:
        Number of rows written.
    """
    df = books_dataframe()

    df.to_csv(
        output_file,
        index=False,
        header=include_header,
        sep=DELIMITER,
        quotechar=QUOTECHAR,
        quoting=csv.QUOTE_ALL,
        lineterminator=LINE_TERMINATOR,
        na_rep=NULL_MARKER,
        encoding="utf-8",
    )

    current_app.logger.info(f"Exported {len(df)} books to {output_file}")
    return len(df)


def read_books_file(input_file, skip_header=True):
    """
    Parse a delimited book file into a DataFrame of raw strings.

    With skip_header the first line names the columns (any subset of the
    books table, in any order). Without it, every line is data laid out in
    table column order.
    """
    df = pd.read_csv(
        input_file,
        sep=DELIMITER,
        quotechar=QUOTECHAR,
        header=0 if skip_header else None,
        names=None if skip_header else BOOK_COLUMNS,
        dtype=str,
        keep_default_na=False,
        na_values=[NULL_MARKER],
    )

    unknown = [name for name in df.columns if name not in BOOK_COLUMNS]
    if unknown:
        raise ValueError(f"Unknown book columns in import file: {', '.join(unknown)}")

    return df


def _records_from_dataframe(df):
    columns = [Book.__table__.c[name] for name in df.columns]

    records = []
    for row in df.itertuples(index=False, name=None):
        records.append(
            {column.name: _from_text(column, raw) for column, raw in zip(columns, row)}
        )

    # A missing value in a NOT NULL column with a server default takes the default
    defaulted = [c.name for c in columns if not c.nullable and c.server_default is not None]
    for record in records:
        for name in defaulted:
            if record[name] is None:
                del record[name]

    return records


def import_books(input_file, skip_header=True):
    """
    Load books from delimited text in a single transaction.

    Any rejected row (duplicate isbn, negative price, ...) rolls back the
    whole load and raises the matching ConstraintViolation. A NULL in a
    NOT NULL column that has a server default (stock_quantity) loads as
    that default; other NULLs load as NULL.

    Returns:
        Number of rows inserted.
    """
    df = read_books_file(input_file, skip_header=skip_header)
    if df.empty:
        current_app.logger.info(f"No books found in {input_file}")
        return 0

    records = _records_from_dataframe(df)

    with guarded_commit(db.session):
        # executemany needs one key set per batch; file order is kept
        for _, batch in groupby(records, key=lambda record: tuple(record)):
            db.session.execute(insert(Book.__table__), list(batch))

    current_app.logger.info(f"Imported {len(records)} books from {input_file}")
    return len(records)
