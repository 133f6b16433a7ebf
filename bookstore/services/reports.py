# Read-only queries across the association tables

from datetime import date, datetime, time, timedelta

from sqlalchemy import and_, func

from bookstore.extensions import db
from bookstore.models import (
    Author,
    Book,
    BookAuthor,
    Category,
    Customer,
    Order,
    OrderDetail,
    Promotion,
    Review,
    StoreInventory,
    StoreLocation,
    t_book_categories,
)


def _as_datetime(value, end=False):
    """Dates bound a whole day: a date end means 'through the end of that day'."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        if end:
            return datetime.combine(value + timedelta(days=1), time.min)
        return datetime.combine(value, time.min)
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def _timestamp_bound(column, value):
    """
    Column and bound in a comparable form.

    SQLite keeps timestamps as text: rows written by CURRENT_TIMESTAMP or raw
    SQL have no fractional seconds while ORM-written rows do, so both sides
    are normalised through datetime() there.
    """
    if db.session.get_bind().dialect.name == "sqlite":
        return func.datetime(column), value.strftime("%Y-%m-%d %H:%M:%S")
    return column, value


def _within(query, column, start=None, end=None):
    if start is not None:
        left, bound = _timestamp_bound(column, _as_datetime(start))
        query = query.filter(left >= bound)
    if end is not None:
        if isinstance(end, datetime):
            left, bound = _timestamp_bound(column, end)
            query = query.filter(left <= bound)
        else:
            left, bound = _timestamp_bound(column, _as_datetime(end, end=True))
            query = query.filter(left < bound)
    return query


def _money(value):
    return round(float(value), 2) if value is not None else 0.0


def line_total():
    """quantity x unit_price x (1 - discount/100) for one order line."""
    return (
        OrderDetail.quantity
        * OrderDetail.unit_price
        * (100.0 - func.coalesce(OrderDetail.discount, 0))
        / 100.0
    )


def books_by_author(author_id):
    rows = (
        db.session.query(Book.book_id, Book.isbn, Book.title, BookAuthor.role)
        .join(BookAuthor, BookAuthor.book_id == Book.book_id)
        .filter(BookAuthor.author_id == author_id)
        .order_by(Book.title)
        .all()
    )
    return [
        {"book_id": book_id, "isbn": isbn, "title": title, "role": role}
        for book_id, isbn, title, role in rows
    ]


def authors_for_book(book_id):
    rows = (
        db.session.query(Author.author_id, Author.first_name, Author.last_name, BookAuthor.role)
        .join(BookAuthor, BookAuthor.author_id == Author.author_id)
        .filter(BookAuthor.book_id == book_id)
        .order_by(Author.last_name, Author.first_name)
        .all()
    )
    return [
        {"author_id": author_id, "name": f"{first} {last}", "role": role}
        for author_id, first, last, role in rows
    ]


def inventory_for_book(book_id):
    """Per-location stock of one book."""
    rows = (
        db.session.query(
            StoreLocation.location_id,
            StoreLocation.name,
            StoreLocation.city,
            StoreInventory.quantity,
            StoreInventory.shelf_location,
        )
        .join(StoreInventory, StoreInventory.location_id == StoreLocation.location_id)
        .filter(StoreInventory.book_id == book_id)
        .order_by(StoreLocation.name)
        .all()
    )
    return [
        {
            "location_id": location_id,
            "location": name,
            "city": city,
            "quantity": quantity,
            "shelf_location": shelf,
        }
        for location_id, name, city, quantity, shelf in rows
    ]


def orders_for_book(book_id, start=None, end=None):
    """Order lines containing a book, optionally limited to an order_date range."""
    query = (
        db.session.query(
            Order.order_id,
            Order.order_date,
            Order.status,
            Order.customer_id,
            OrderDetail.quantity,
            OrderDetail.unit_price,
            OrderDetail.discount,
        )
        .join(OrderDetail, OrderDetail.order_id == Order.order_id)
        .filter(OrderDetail.book_id == book_id)
    )
    query = _within(query, Order.order_date, start, end)

    return [
        {
            "order_id": order_id,
            "order_date": order_date.isoformat() if order_date else None,
            "status": status,
            "customer_id": customer_id,
            "quantity": quantity,
            "unit_price": _money(unit_price),
            "discount": _money(discount),
        }
        for order_id, order_date, status, customer_id, quantity, unit_price, discount in (
            query.order_by(Order.order_date, Order.order_id).all()
        )
    ]


def revenue_by_book(start=None, end=None):
    """Discounted revenue and units sold per book, highest revenue first."""
    revenue = func.sum(line_total()).label("revenue")
    query = (
        db.session.query(
            Book.book_id,
            Book.title,
            func.sum(OrderDetail.quantity).label("units"),
            revenue,
        )
        .join(OrderDetail, OrderDetail.book_id == Book.book_id)
        .join(Order, Order.order_id == OrderDetail.order_id)
    )
    query = _within(query, Order.order_date, start, end)

    rows = query.group_by(Book.book_id, Book.title).order_by(revenue.desc(), Book.book_id).all()
    return [
        {"book_id": book_id, "title": title, "units": int(units), "revenue": _money(total)}
        for book_id, title, units, total in rows
    ]


def category_ratings():
    """Average review rating and review count per category."""
    rows = (
        db.session.query(
            Category.category_id,
            Category.name,
            func.avg(Review.rating),
            func.count(Review.review_id),
        )
        .join(t_book_categories, t_book_categories.c.category_id == Category.category_id)
        .join(Review, Review.book_id == t_book_categories.c.book_id)
        .group_by(Category.category_id, Category.name)
        .order_by(Category.name)
        .all()
    )
    return [
        {
            "category_id": category_id,
            "category": name,
            "average_rating": round(float(avg), 2) if avg is not None else None,
            "review_count": count,
        }
        for category_id, name, avg, count in rows
    ]


def top_customers(limit=5, start=None, end=None):
    """Customers ranked by total order value."""
    spent = func.sum(Order.total_amount).label("spent")
    query = (
        db.session.query(
            Customer.customer_id,
            Customer.first_name,
            Customer.last_name,
            func.count(Order.order_id),
            spent,
        )
        .join(Order, Order.customer_id == Customer.customer_id)
    )
    query = _within(query, Order.order_date, start, end)

    rows = (
        query.group_by(Customer.customer_id, Customer.first_name, Customer.last_name)
        .order_by(spent.desc(), Customer.customer_id)
        .limit(limit)
        .all()
    )
    return [
        {
            "customer_id": customer_id,
            "name": f"{first} {last}",
            "orders": orders,
            "total_spent": _money(total),
        }
        for customer_id, first, last, orders, total in rows
    ]


def inventory_discrepancies(include_untracked=False):
    """
    Books whose stock_quantity differs from the sum over store_inventory.

    Book.stock_quantity is maintained independently of the per-location rows,
    so drift is expected and only reported here. Books with no
    store_inventory rows are skipped unless include_untracked is set.
    """
    located = (
        db.session.query(
            StoreInventory.book_id.label("book_id"),
            func.sum(StoreInventory.quantity).label("located"),
        )
        .group_by(StoreInventory.book_id)
        .subquery()
    )

    query = db.session.query(
        Book.book_id,
        Book.isbn,
        Book.title,
        Book.stock_quantity,
        func.coalesce(located.c.located, 0),
    )
    if include_untracked:
        query = query.outerjoin(located, located.c.book_id == Book.book_id)
    else:
        query = query.join(located, located.c.book_id == Book.book_id)

    rows = (
        query.filter(Book.stock_quantity != func.coalesce(located.c.located, 0))
        .order_by(Book.book_id)
        .all()
    )
    return [
        {
            "book_id": book_id,
            "isbn": isbn,
            "title": title,
            "stock_quantity": stock,
            "located_quantity": int(located_qty),
            "difference": stock - int(located_qty),
        }
        for book_id, isbn, title, stock, located_qty in rows
    ]


def active_promotions(on_date=None):
    """Promotions flagged active whose window contains on_date, with their books."""
    on_date = on_date or date.today()
    promotions = (
        db.session.query(Promotion)
        .filter(
            and_(
                Promotion.is_active.is_(True),
                Promotion.start_date <= on_date,
                Promotion.end_date >= on_date,
            )
        )
        .order_by(Promotion.start_date, Promotion.promotion_id)
        .all()
    )
    return [
        {
            "promotion_id": promo.promotion_id,
            "name": promo.name,
            "discount_rate": _money(promo.discount_rate),
            "start_date": promo.start_date.isoformat(),
            "end_date": promo.end_date.isoformat(),
            "min_purchase": _money(promo.min_purchase),
            "books": [book.isbn for book in sorted(promo.books, key=lambda b: b.book_id)],
        }
        for promo in promotions
    ]
