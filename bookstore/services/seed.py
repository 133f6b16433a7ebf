# Illustrative sample data for a fresh bookstore database

from datetime import date, datetime, time
from decimal import Decimal

from bookstore.errors import guarded_commit
from bookstore.extensions import db
from bookstore.models import (
    AttendanceStatus,
    Author,
    Book,
    BookAuthor,
    Category,
    Customer,
    Employee,
    Event,
    EventRegistration,
    GiftCard,
    Order,
    OrderDetail,
    OrderStatus,
    PaymentMethod,
    Promotion,
    Publisher,
    Purchase,
    PurchaseDetail,
    PurchaseStatus,
    Review,
    StoreInventory,
    StoreLocation,
    Supplier,
    Wishlist,
    WishlistBook,
)


def _get_or_create(model, lookup, **fields):
    """Return the row matching lookup, creating it with fields if missing."""
    instance = db.session.query(model).filter_by(**lookup).first()
    if instance:
        print(f"  ℹ {model.__tablename__} {lookup} already exists")
        return instance, False

    instance = model(**lookup, **fields)
    db.session.add(instance)
    db.session.flush()
    print(f"  ✅ Created {model.__tablename__} {lookup}")
    return instance, True


def _seed_catalog():
    hodder, _ = _get_or_create(
        Publisher,
        {"name": "Hodder & Stoughton"},
        address="Carmelite House, 50 Victoria Embankment, London",
        website="https://www.hodder.co.uk",
    )
    penguin, _ = _get_or_create(
        Publisher,
        {"name": "Penguin Random House"},
        address="1745 Broadway, New York",
        website="https://www.penguinrandomhouse.com",
    )
    vintage, _ = _get_or_create(
        Publisher, {"name": "Vintage"}, address="20 Vauxhall Bridge Road, London"
    )

    meyer, _ = _get_or_create(
        Author,
        {"first_name": "Deon", "last_name": "Meyer"},
        birth_date=date(1958, 7, 4),
        country="South Africa",
    )
    adichie, _ = _get_or_create(
        Author,
        {"first_name": "Chimamanda Ngozi", "last_name": "Adichie"},
        birth_date=date(1977, 9, 15),
        country="Nigeria",
    )
    murakami, _ = _get_or_create(
        Author,
        {"first_name": "Haruki", "last_name": "Murakami"},
        birth_date=date(1949, 1, 12),
        country="Japan",
    )

    fiction, _ = _get_or_create(Category, {"name": "Fiction"}, description="Novels and stories")
    crime, _ = _get_or_create(
        Category, {"name": "Crime"}, parent_category_id=fiction.category_id
    )
    literary, _ = _get_or_create(
        Category, {"name": "Literary Fiction"}, parent_category_id=fiction.category_id
    )
    _get_or_create(Category, {"name": "Non-Fiction"})

    books = {}
    for isbn, title, publisher, published, price, stock, author, category in [
        ("9780802127075", "Fever", hodder, date(2017, 6, 6), "16.99", 12, meyer, crime),
        ("9780802124333", "Icarus", hodder, date(2015, 8, 4), "15.50", 5, meyer, crime),
        ("9780307455925", "Americanah", penguin, date(2013, 5, 14), "17.00", 8, adichie, literary),
        ("9780099448822", "Norwegian Wood", vintage, date(2000, 4, 6), "14.99", 20, murakami, literary),
    ]:
        book, created = _get_or_create(
            Book,
            {"isbn": isbn},
            title=title,
            publisher_id=publisher.publisher_id,
            publication_date=published,
            price=Decimal(price),
            stock_quantity=stock,
            is_featured=title == "Fever",
        )
        if created:
            db.session.add(BookAuthor(book_id=book.book_id, author_id=author.author_id))
            book.categories.append(category)
        books[isbn] = book

    return books


def _seed_people():
    manager, _ = _get_or_create(
        Employee,
        {"email": "thandi.nkosi@bookstore.example"},
        first_name="Thandi",
        last_name="Nkosi",
        position="Store Manager",
        salary=Decimal("52000.00"),
        hire_date=date(2019, 2, 1),
    )
    clerk, _ = _get_or_create(
        Employee,
        {"email": "pieter.smit@bookstore.example"},
        first_name="Pieter",
        last_name="Smit",
        position="Sales Associate",
        salary=Decimal("28000.00"),
        hire_date=date(2022, 9, 12),
        manager_id=manager.employee_id,
    )

    alice, _ = _get_or_create(
        Customer,
        {"email": "alice.dlamini@example.com"},
        first_name="Alice",
        last_name="Dlamini",
        city="Cape Town",
        country="South Africa",
        is_member=True,
        points=120,
    )
    ben, _ = _get_or_create(
        Customer,
        {"email": "ben.okafor@example.com"},
        first_name="Ben",
        last_name="Okafor",
        city="Johannesburg",
        country="South Africa",
    )
    return manager, clerk, alice, ben


def seed_sample_data():
    """
    Seed a small, consistent bookstore into the current database.

    Safe to run repeatedly: rows are looked up by their natural keys first.
    Call this ONLY inside an app.app_context().
    """
    print("🔄 Seeding bookstore sample data...")

    with guarded_commit(db.session):
        books = _seed_catalog()
        manager, clerk, alice, ben = _seed_people()
        fever = books["9780802127075"]
        icarus = books["9780802124333"]
        americanah = books["9780307455925"]
        norwegian_wood = books["9780099448822"]

        store, created = _get_or_create(
            StoreLocation,
            {"name": "Downtown Books"},
            address="12 Long Street",
            city="Cape Town",
            postal_code="8001",
            country="South Africa",
            manager_id=manager.employee_id,
            opening_hours="Mon-Sat 09:00-18:00",
        )
        if created:
            # Fever is deliberately short here: stock_quantity is tracked separately
            for book, quantity, shelf in [
                (fever, 7, "A1"),
                (icarus, 5, "A1"),
                (americanah, 8, "B3"),
                (norwegian_wood, 20, "B4"),
            ]:
                db.session.add(
                    StoreInventory(
                        location_id=store.location_id,
                        book_id=book.book_id,
                        quantity=quantity,
                        shelf_location=shelf,
                    )
                )

        first_order, created = _get_or_create(
            Order,
            {"tracking_number": "TRK-0001"},
            customer_id=alice.customer_id,
            employee_id=clerk.employee_id,
            order_date=datetime(2025, 5, 2, 10, 30),
            status=OrderStatus.DELIVERED.value,
            payment_method=PaymentMethod.CREDIT_CARD.value,
            shipping_fee=Decimal("4.50"),
            total_amount=Decimal("53.78"),
        )
        if created:
            db.session.add_all(
                [
                    OrderDetail(order_id=first_order.order_id, book_id=fever.book_id,
                                quantity=2, unit_price=Decimal("16.99")),
                    OrderDetail(order_id=first_order.order_id, book_id=americanah.book_id,
                                quantity=1, unit_price=Decimal("17.00"),
                                discount=Decimal("10.00")),
                ]
            )

        second_order, created = _get_or_create(
            Order,
            {"tracking_number": "TRK-0002"},
            customer_id=ben.customer_id,
            employee_id=clerk.employee_id,
            order_date=datetime(2025, 5, 6, 15, 0),
            status=OrderStatus.PROCESSING.value,
            payment_method=PaymentMethod.PAYPAL.value,
            total_amount=Decimal("14.99"),
        )
        if created:
            db.session.add(
                OrderDetail(order_id=second_order.order_id, book_id=norwegian_wood.book_id,
                            quantity=1, unit_price=Decimal("14.99"))
            )

        supplier, _ = _get_or_create(
            Supplier,
            {"name": "Protea Book Distributors"},
            contact_person="Johan van Wyk",
            email="orders@protea.example",
            city="Cape Town",
            country="South Africa",
        )
        purchase, created = _get_or_create(
            Purchase,
            {"supplier_id": supplier.supplier_id, "purchase_date": datetime(2025, 4, 20, 9, 0)},
            employee_id=manager.employee_id,
            status=PurchaseStatus.RECEIVED.value,
            total_amount=Decimal("200.00"),
        )
        if created:
            db.session.add(
                PurchaseDetail(purchase_id=purchase.purchase_id, book_id=fever.book_id,
                               quantity=20, unit_cost=Decimal("10.00"))
            )

        promotion, created = _get_or_create(
            Promotion,
            {"name": "Winter Crime Week"},
            description="15% off South African crime fiction",
            discount_rate=Decimal("15.00"),
            start_date=date(2025, 6, 1),
            end_date=date(2025, 6, 7),
        )
        if created:
            promotion.books.extend([fever, icarus])

        _get_or_create(
            Review,
            {"book_id": fever.book_id, "customer_id": alice.customer_id},
            rating=5,
            review_text="Could not put it down.",
            is_verified=True,
        )
        _get_or_create(
            Review,
            {"book_id": norwegian_wood.book_id, "customer_id": ben.customer_id},
            rating=4,
            review_text="Quietly devastating.",
        )

        wishlist, created = _get_or_create(
            Wishlist, {"customer_id": alice.customer_id, "name": "Holiday reading"}
        )
        if created:
            db.session.add(
                WishlistBook(wishlist_id=wishlist.wishlist_id, book_id=icarus.book_id,
                             notes="Next in the Benny Griessel series")
            )

        _get_or_create(
            GiftCard,
            {"card_number": "GC-2025-0001"},
            initial_amount=Decimal("50.00"),
            current_balance=Decimal("50.00"),
            issue_date=date(2025, 1, 10),
            expiry_date=date(2026, 1, 10),
            customer_id=ben.customer_id,
        )

        event, created = _get_or_create(
            Event,
            {"title": "An Evening with Deon Meyer"},
            event_date=date(2025, 6, 3),
            start_time=time(18, 0),
            end_time=time(20, 0),
            location_id=store.location_id,
            capacity=40,
            registration_required=True,
        )
        if created:
            db.session.add(
                EventRegistration(event_id=event.event_id, customer_id=alice.customer_id,
                                  attendance_status=AttendanceStatus.REGISTERED.value)
            )

    print("✨ Seeding complete!")
