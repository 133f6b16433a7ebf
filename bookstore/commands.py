# bookstore/commands.py
import click
from flask import current_app
from flask.cli import with_appcontext

from bookstore.errors import ConstraintViolation
from bookstore.extensions import db
from bookstore.models import Category, Employee
from bookstore.services.catalog_io import export_books, import_books
from bookstore.services.hierarchy import find_cycles
from bookstore.services.seed import seed_sample_data


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create every bookstore table that does not exist yet."""
    db.create_all()
    print(f"📦 Created {len(db.metadata.tables)} tables")


@click.command("drop-db")
@click.confirmation_option(prompt="This deletes every bookstore table. Continue?")
@with_appcontext
def drop_db_command():
    """Drop every bookstore table."""
    db.drop_all()
    print("🧹 Dropped all tables")


@click.command("seed-db")
@with_appcontext
def seed_db_command():
    """Insert the sample catalog, staff, customers and orders."""
    try:
        seed_sample_data()
    except ConstraintViolation as e:
        print(f"❌ Seeding failed ({e.kind}): {e.message}")
        raise SystemExit(1)


@click.command("export-books")
@click.argument("path", required=False, type=click.Path(dir_okay=False, writable=True))
@click.option("--no-header", is_flag=True, help="Omit the column-name line.")
@with_appcontext
def export_books_command(path, no_header):
    """Write the books table to PATH (default BOOKS_EXPORT_PATH) as quoted, comma-separated text."""
    path = path or current_app.config["BOOKS_EXPORT_PATH"]
    count = export_books(path, include_header=not no_header)
    print(f"✅ Exported {count} books to '{path}'")


@click.command("import-books")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--no-header", is_flag=True, help="PATH has no column-name line.")
@with_appcontext
def import_books_command(path, no_header):
    """Load books from PATH in a single transaction."""
    try:
        count = import_books(path, skip_header=not no_header)
    except ConstraintViolation as e:
        print(f"❌ Import rolled back ({e.kind}): {e.message}")
        raise SystemExit(1)
    except ValueError as e:
        print(f"❌ Import rejected: {e}")
        raise SystemExit(1)
    print(f"✅ Imported {count} books from '{path}'")


@click.command("check-hierarchy")
@with_appcontext
def check_hierarchy_command():
    """Report loops in category parents and employee managers."""
    found = False
    for model in (Category, Employee):
        for cycle in find_cycles(model):
            found = True
            chain = " -> ".join(str(node) for node in cycle + cycle[:1])
            print(f"⚠️  {model.__tablename__} cycle: {chain}")

    if found:
        raise SystemExit(1)
    print("✅ No hierarchy cycles found")


COMMANDS = [
    init_db_command,
    drop_db_command,
    seed_db_command,
    export_books_command,
    import_books_command,
    check_hierarchy_command,
]
