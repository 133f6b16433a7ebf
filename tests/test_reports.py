from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import text

from bookstore.models import (
    Book,
    OrderDetail,
    Promotion,
    Review,
    StoreInventory,
    t_book_categories,
)
from bookstore.services import reports
from conftest import make_book


@pytest.fixture
def stocked(db_session, sales_fixture, sample_location):
    """A tracked at 4 of 10, B at 10 of 10, C untracked."""
    books = sales_fixture["books"]
    db_session.add_all(
        [
            StoreInventory(
                location_id=sample_location.location_id,
                book_id=books["A"].book_id,
                quantity=4,
                shelf_location="F-12",
            ),
            StoreInventory(
                location_id=sample_location.location_id,
                book_id=books["B"].book_id,
                quantity=10,
            ),
        ]
    )
    db_session.commit()
    return books


@pytest.mark.reports
class TestRevenue:
    """Revenue is quantity x unit_price x (1 - discount/100), summed per book."""

    def test_revenue_by_book(self, app, sales_fixture):
        rows = reports.revenue_by_book()

        assert [row["title"] for row in rows] == ["Bravo", "Alpha", "Charlie"]
        revenue = {row["title"]: row["revenue"] for row in rows}
        assert revenue["Alpha"] == pytest.approx(25.00)
        assert revenue["Bravo"] == pytest.approx(48.00)
        assert revenue["Charlie"] == pytest.approx(15.00)
        assert all(row["units"] == 3 for row in rows)

    def test_revenue_within_dates(self, app, sales_fixture):
        rows = reports.revenue_by_book(date(2025, 3, 1), date(2025, 3, 31))

        revenue = {row["title"]: row["revenue"] for row in rows}
        assert revenue == {
            "Alpha": pytest.approx(25.00),
            "Bravo": pytest.approx(18.00),
            "Charlie": pytest.approx(15.00),
        }

    def test_end_date_includes_whole_day(self, app, sales_fixture):
        rows = reports.revenue_by_book(date(2025, 4, 10), date(2025, 4, 10))

        assert [(row["title"], row["revenue"]) for row in rows] == [
            ("Bravo", pytest.approx(30.00))
        ]

    def test_datetime_bounds(self, app, sales_fixture):
        rows = reports.revenue_by_book(
            datetime(2025, 3, 1, 10, 0), datetime(2025, 3, 5, 14, 30)
        )

        assert {row["title"] for row in rows} == {"Alpha", "Charlie"}

    def test_bounds_match_timestamps_written_by_sql(self, app, db_session):
        """Order dates stored without fractional seconds still meet datetime bounds."""
        book = make_book(db_session, "raw-sql", title="Midnight")
        order_id = db_session.execute(
            text(
                "INSERT INTO orders (order_date, total_amount) "
                "VALUES ('2025-03-01 00:00:00', 10.00)"
            )
        ).lastrowid
        db_session.add(
            OrderDetail(order_id=order_id, book_id=book.book_id, quantity=1, unit_price=Decimal("10.00"))
        )
        db_session.commit()

        from_midnight = reports.revenue_by_book(start=datetime(2025, 3, 1))
        until_midnight = reports.revenue_by_book(end=datetime(2025, 3, 1))
        same_day = reports.revenue_by_book(date(2025, 3, 1), date(2025, 3, 1))
        after = reports.revenue_by_book(start=datetime(2025, 3, 1, 0, 0, 1))

        assert [row["title"] for row in from_midnight] == ["Midnight"]
        assert [row["title"] for row in until_midnight] == ["Midnight"]
        assert [row["title"] for row in same_day] == ["Midnight"]
        assert after == []

    def test_no_sales(self, app, db_session):
        make_book(db_session, "unsold")
        db_session.commit()

        assert reports.revenue_by_book() == []

    def test_null_discount_counts_as_none(self, app, db_session, sales_fixture):
        bravo = sales_fixture["books"]["B"]
        line = db_session.get(OrderDetail, (sales_fixture["orders"][0].order_id, bravo.book_id))
        line.discount = None
        db_session.commit()

        rows = reports.revenue_by_book(date(2025, 3, 1), date(2025, 3, 1))

        revenue = {row["title"]: row["revenue"] for row in rows}
        assert revenue["Bravo"] == pytest.approx(20.00)


@pytest.mark.reports
class TestOrders:
    def test_orders_for_book(self, app, sales_fixture):
        book = sales_fixture["books"]["A"]

        rows = reports.orders_for_book(book.book_id)

        assert [row["order_id"] for row in rows] == [
            sales_fixture["orders"][0].order_id,
            sales_fixture["orders"][1].order_id,
        ]
        assert rows[1]["discount"] == pytest.approx(50.0)
        assert rows[0]["status"] == "Pending"

    def test_orders_for_book_from_date(self, app, sales_fixture):
        book = sales_fixture["books"]["A"]

        rows = reports.orders_for_book(book.book_id, start=date(2025, 3, 2))

        assert [row["order_id"] for row in rows] == [sales_fixture["orders"][1].order_id]

    def test_top_customers(self, app, sales_fixture):
        rows = reports.top_customers()

        assert [row["name"] for row in rows] == ["Alice Customer", "Ben Customer"]
        assert rows[0]["orders"] == 2
        assert rows[0]["total_spent"] == pytest.approx(68.00)
        assert rows[1]["total_spent"] == pytest.approx(20.00)

    def test_top_customers_limit_and_range(self, app, sales_fixture):
        rows = reports.top_customers(limit=1, start=date(2025, 3, 1), end=date(2025, 3, 31))

        assert len(rows) == 1
        assert rows[0]["total_spent"] == pytest.approx(38.00)


@pytest.mark.reports
class TestCatalogReports:
    def test_books_by_author(self, app, sample_book, sample_author):
        rows = reports.books_by_author(sample_author.author_id)

        assert rows == [
            {
                "book_id": sample_book.book_id,
                "isbn": "9780802127075",
                "title": "Fever",
                "role": "Author",
            }
        ]

    def test_authors_for_book(self, app, sample_book):
        rows = reports.authors_for_book(sample_book.book_id)

        assert [row["name"] for row in rows] == ["Deon Meyer"]

    def test_category_ratings(self, app, db_session, sales_fixture, category_tree):
        books = sales_fixture["books"]
        alice = sales_fixture["customers"]["alice"]
        crime = category_tree["crime"].category_id
        fiction = category_tree["fiction"].category_id
        db_session.execute(
            t_book_categories.insert(),
            [
                {"book_id": books["A"].book_id, "category_id": crime},
                {"book_id": books["B"].book_id, "category_id": crime},
                {"book_id": books["B"].book_id, "category_id": fiction},
            ],
        )
        db_session.add_all(
            [
                Review(book_id=books["A"].book_id, customer_id=alice.customer_id, rating=5),
                Review(book_id=books["A"].book_id, customer_id=alice.customer_id, rating=4),
                Review(book_id=books["B"].book_id, customer_id=alice.customer_id, rating=2),
            ]
        )
        db_session.commit()

        rows = {row["category"]: row for row in reports.category_ratings()}

        assert set(rows) == {"Crime", "Fiction"}
        assert rows["Crime"]["review_count"] == 3
        assert rows["Crime"]["average_rating"] == pytest.approx(3.67)
        assert rows["Fiction"]["review_count"] == 1
        assert rows["Fiction"]["average_rating"] == pytest.approx(2.0)

    def test_active_promotions(self, app, db_session, sales_fixture):
        books = sales_fixture["books"]
        running = Promotion(
            name="Winter Crime Week",
            discount_rate=Decimal("15"),
            start_date=date(2025, 6, 1),
            end_date=date(2025, 6, 7),
        )
        switched_off = Promotion(
            name="Paused",
            discount_rate=Decimal("5"),
            start_date=date(2025, 6, 1),
            end_date=date(2025, 6, 30),
            is_active=False,
        )
        running.books.extend([books["B"], books["A"]])
        db_session.add_all([running, switched_off])
        db_session.commit()

        on_last_day = reports.active_promotions(date(2025, 6, 7))
        after = reports.active_promotions(date(2025, 6, 8))

        assert [promo["name"] for promo in on_last_day] == ["Winter Crime Week"]
        assert on_last_day[0]["books"] == ["ISBN-A", "ISBN-B"]
        assert on_last_day[0]["discount_rate"] == pytest.approx(15.0)
        assert after == []


@pytest.mark.reports
class TestInventory:
    def test_inventory_for_book(self, app, stocked, sample_location):
        rows = reports.inventory_for_book(stocked["A"].book_id)

        assert rows == [
            {
                "location_id": sample_location.location_id,
                "location": "Downtown Books",
                "city": "Cape Town",
                "quantity": 4,
                "shelf_location": "F-12",
            }
        ]

    def test_discrepancies_only_tracked(self, app, stocked):
        rows = reports.inventory_discrepancies()

        assert len(rows) == 1
        assert rows[0]["isbn"] == "ISBN-A"
        assert rows[0]["stock_quantity"] == 10
        assert rows[0]["located_quantity"] == 4
        assert rows[0]["difference"] == 6

    def test_discrepancies_include_untracked(self, app, stocked):
        rows = reports.inventory_discrepancies(include_untracked=True)

        assert [(row["isbn"], row["difference"]) for row in rows] == [
            ("ISBN-A", 6),
            ("ISBN-C", 10),
        ]

    def test_stock_quantity_not_synchronised(self, app, db_session, stocked, sample_location):
        inventory = db_session.get(
            StoreInventory, (sample_location.location_id, stocked["B"].book_id)
        )
        inventory.quantity = 3
        db_session.commit()

        assert db_session.get(Book, stocked["B"].book_id).stock_quantity == 10
        assert [row["isbn"] for row in reports.inventory_discrepancies()] == [
            "ISBN-A",
            "ISBN-B",
        ]
