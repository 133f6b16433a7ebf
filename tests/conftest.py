"""
Pytest configuration and shared fixtures for the bookstore schema tests.
"""

import os
from datetime import date, datetime
from decimal import Decimal

import pytest

os.environ.setdefault("TESTING", "True")
os.environ.setdefault("FLASK_ENV", "testing")

from bookstore.config import is_production_database  # noqa: E402
from bookstore.extensions import db as database  # noqa: E402
from bookstore.models import (  # noqa: E402
    Author,
    Book,
    BookAuthor,
    Category,
    Customer,
    Employee,
    Order,
    OrderDetail,
    Publisher,
    StoreLocation,
)
from main import create_app  # noqa: E402

TEST_DATABASE_URL = os.environ.get("BOOKSTORE_TEST_URL", "sqlite://")


@pytest.fixture
def app():
    """A fresh app bound to an empty in-memory database for every test."""
    if is_production_database(TEST_DATABASE_URL):
        pytest.exit(f"Refusing to run tests against {TEST_DATABASE_URL}", returncode=1)

    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": TEST_DATABASE_URL,
            "SECRET_KEY": "test-secret-key-for-testing-only",
        }
    )

    with app.app_context():
        database.create_all()
        yield app
        database.session.remove()
        database.drop_all()


@pytest.fixture
def db(app):
    return database


@pytest.fixture
def db_session(db):
    yield db.session
    db.session.rollback()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


def make_book(session, isbn, title=None, price="10.00", stock_quantity=0, **fields):
    book = Book(
        isbn=isbn,
        title=title or f"Book {isbn}",
        price=Decimal(price),
        stock_quantity=stock_quantity,
        **fields,
    )
    session.add(book)
    session.flush()
    return book


def make_customer(session, email, first_name="Test", last_name="Customer", **fields):
    customer = Customer(email=email, first_name=first_name, last_name=last_name, **fields)
    session.add(customer)
    session.flush()
    return customer


def make_employee(session, email, first_name="Staff", last_name="Member", **fields):
    fields.setdefault("position", "Sales Associate")
    fields.setdefault("hire_date", date(2024, 1, 15))
    employee = Employee(email=email, first_name=first_name, last_name=last_name, **fields)
    session.add(employee)
    session.flush()
    return employee


@pytest.fixture
def sample_publisher(db_session):
    publisher = Publisher(name="Hodder & Stoughton", website="https://www.hodder.co.uk")
    db_session.add(publisher)
    db_session.commit()
    return publisher


@pytest.fixture
def sample_author(db_session):
    author = Author(first_name="Deon", last_name="Meyer", country="South Africa")
    db_session.add(author)
    db_session.commit()
    return author


@pytest.fixture
def sample_book(db_session, sample_publisher, sample_author):
    book = make_book(
        db_session,
        "9780802127075",
        title="Fever",
        price="16.99",
        stock_quantity=12,
        publisher_id=sample_publisher.publisher_id,
        publication_date=date(2017, 6, 6),
    )
    db_session.add(BookAuthor(book_id=book.book_id, author_id=sample_author.author_id))
    db_session.commit()
    return book


@pytest.fixture
def sample_customer(db_session):
    customer = make_customer(db_session, "alice@example.com", first_name="Alice", last_name="Dlamini")
    db_session.commit()
    return customer


@pytest.fixture
def sample_location(db_session):
    location = StoreLocation(
        name="Downtown Books",
        address="12 Long Street",
        city="Cape Town",
        postal_code="8001",
        country="South Africa",
    )
    db_session.add(location)
    db_session.commit()
    return location


@pytest.fixture
def sales_fixture(db_session):
    """
    Three books, three orders and five order lines with known totals.

    Discounted revenue per book:
        A: 2 x 10.00 + 1 x 10.00 x 0.50        = 25.00
        B: 1 x 20.00 x 0.90 + 2 x 20.00 x 0.75 = 48.00
        C: 3 x 5.00                            = 15.00
    Orders 1 and 2 fall in March 2025, order 3 in April 2025.
    """
    book_a = make_book(db_session, "ISBN-A", title="Alpha", price="10.00", stock_quantity=10)
    book_b = make_book(db_session, "ISBN-B", title="Bravo", price="20.00", stock_quantity=10)
    book_c = make_book(db_session, "ISBN-C", title="Charlie", price="5.00", stock_quantity=10)

    alice = make_customer(db_session, "alice@example.com", first_name="Alice")
    ben = make_customer(db_session, "ben@example.com", first_name="Ben")

    orders = []
    for customer, placed, total in [
        (alice, datetime(2025, 3, 1, 9, 0), "38.00"),
        (ben, datetime(2025, 3, 5, 14, 30), "20.00"),
        (alice, datetime(2025, 4, 10, 11, 15), "30.00"),
    ]:
        order = Order(
            customer_id=customer.customer_id,
            order_date=placed,
            total_amount=Decimal(total),
        )
        db_session.add(order)
        db_session.flush()
        orders.append(order)

    for order, book, quantity, unit_price, discount in [
        (orders[0], book_a, 2, "10.00", "0"),
        (orders[0], book_b, 1, "20.00", "10"),
        (orders[1], book_a, 1, "10.00", "50"),
        (orders[1], book_c, 3, "5.00", "0"),
        (orders[2], book_b, 2, "20.00", "25"),
    ]:
        db_session.add(
            OrderDetail(
                order_id=order.order_id,
                book_id=book.book_id,
                quantity=quantity,
                unit_price=Decimal(unit_price),
                discount=Decimal(discount),
            )
        )

    db_session.commit()
    return {
        "books": {"A": book_a, "B": book_b, "C": book_c},
        "customers": {"alice": alice, "ben": ben},
        "orders": orders,
    }


@pytest.fixture
def category_tree(db_session):
    """Fiction > Crime > Nordic Noir, plus a standalone Non-Fiction."""
    fiction = Category(name="Fiction")
    db_session.add(fiction)
    db_session.flush()
    crime = Category(name="Crime", parent_category_id=fiction.category_id)
    db_session.add(crime)
    db_session.flush()
    noir = Category(name="Nordic Noir", parent_category_id=crime.category_id)
    non_fiction = Category(name="Non-Fiction")
    db_session.add_all([noir, non_fiction])
    db_session.commit()
    return {"fiction": fiction, "crime": crime, "noir": noir, "non_fiction": non_fiction}
