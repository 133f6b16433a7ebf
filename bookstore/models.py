import enum
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DECIMAL,
    Date,
    Enum,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
    TIMESTAMP,
    Table,
    Text,
    Time,
    UniqueConstraint,
    false,
    func,
    text,
    true,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

Base = declarative_base()
metadata = Base.metadata


class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentMethod(str, enum.Enum):
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    CASH = "Cash"
    PAYPAL = "PayPal"
    BANK_TRANSFER = "Bank Transfer"


class PurchaseStatus(str, enum.Enum):
    ORDERED = "Ordered"
    RECEIVED = "Received"
    PENDING = "Pending"
    CANCELLED = "Cancelled"


class AttendanceStatus(str, enum.Enum):
    REGISTERED = "Registered"
    ATTENDED = "Attended"
    CANCELLED = "Cancelled"
    NO_SHOW = "No-show"


def _enum_column_type(python_enum, name):
    # A named CHECK is emitted where the backend has no native ENUM
    return Enum(
        *[member.value for member in python_enum],
        name=name,
        create_constraint=True,
    )


# Constraint names that guard closed value sets; used to tell enumeration
# failures apart from ordinary check failures.
ENUM_CONSTRAINT_NAMES = {
    "order_status",
    "payment_method",
    "purchase_status",
    "attendance_status",
}


class Author(Base):
    __tablename__ = "authors"
    __table_args__ = (UniqueConstraint("first_name", "last_name", name="uq_author_name"),)

    author_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name = mapped_column(String(50), nullable=False)
    last_name = mapped_column(String(50), nullable=False)
    birth_date = mapped_column(Date)
    country = mapped_column(String(50))
    biography = mapped_column(Text)
    date_added = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    book_authors: Mapped[List["BookAuthor"]] = relationship(
        "BookAuthor", uselist=True, back_populates="author", cascade="all", passive_deletes=True
    )


class Publisher(Base):
    __tablename__ = "publishers"
    __table_args__ = (Index("uq_publishers_name", "name", unique=True),)

    publisher_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    name = mapped_column(String(100), nullable=False)
    address = mapped_column(Text)
    phone = mapped_column(String(20))
    email = mapped_column(String(100))
    website = mapped_column(String(255))
    contact_person = mapped_column(String(100))
    date_added = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    books: Mapped[List["Book"]] = relationship(
        "Book", uselist=True, back_populates="publisher", passive_deletes=True
    )


class Category(Base):
    __tablename__ = "categories"
    __table_args__ = (
        ForeignKeyConstraint(
            ["parent_category_id"],
            ["categories.category_id"],
            ondelete="SET NULL",
            name="fk_category_parent",
        ),
        Index("uq_categories_name", "name", unique=True),
        Index("ix_categories_parent", "parent_category_id"),
    )

    category_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    name = mapped_column(String(50), nullable=False)
    description = mapped_column(Text)
    parent_category_id = mapped_column(Integer)
    date_added = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    parent: Mapped[Optional["Category"]] = relationship(
        "Category", remote_side=[category_id], back_populates="children"
    )
    children: Mapped[List["Category"]] = relationship(
        "Category", uselist=True, back_populates="parent", passive_deletes=True
    )
    books: Mapped[List["Book"]] = relationship(
        "Book", secondary="book_categories", back_populates="categories", passive_deletes=True
    )


class Book(Base):
    __tablename__ = "books"
    __table_args__ = (
        ForeignKeyConstraint(
            ["publisher_id"],
            ["publishers.publisher_id"],
            ondelete="SET NULL",
            name="fk_book_publisher",
        ),
        CheckConstraint("price >= 0", name="ck_books_price"),
        CheckConstraint("stock_quantity >= 0", name="ck_books_stock_quantity"),
        Index("uq_books_isbn", "isbn", unique=True),
        Index("ix_books_publisher", "publisher_id"),
    )

    book_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    isbn = mapped_column(String(20), nullable=False)
    title = mapped_column(String(255), nullable=False)
    publisher_id = mapped_column(Integer)
    publication_date = mapped_column(Date)
    edition = mapped_column(String(20))
    language = mapped_column(String(30), server_default="English")
    page_count = mapped_column(Integer)
    description = mapped_column(Text)
    cover_image = mapped_column(String(255))
    price = mapped_column(DECIMAL(10, 2), nullable=False)
    stock_quantity = mapped_column(Integer, nullable=False, server_default=text("0"))
    is_featured = mapped_column(Boolean, server_default=false())
    date_added = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    publisher: Mapped[Optional["Publisher"]] = relationship("Publisher", back_populates="books")
    book_authors: Mapped[List["BookAuthor"]] = relationship(
        "BookAuthor", uselist=True, back_populates="book", cascade="all", passive_deletes=True
    )
    categories: Mapped[List["Category"]] = relationship(
        "Category", secondary="book_categories", back_populates="books", passive_deletes=True
    )
    promotions: Mapped[List["Promotion"]] = relationship(
        "Promotion", secondary="book_promotions", back_populates="books", passive_deletes=True
    )
    order_details: Mapped[List["OrderDetail"]] = relationship(
        "OrderDetail", uselist=True, back_populates="book", cascade="all", passive_deletes=True
    )
    purchase_details: Mapped[List["PurchaseDetail"]] = relationship(
        "PurchaseDetail", uselist=True, back_populates="book", cascade="all", passive_deletes=True
    )
    reviews: Mapped[List["Review"]] = relationship(
        "Review", uselist=True, back_populates="book", cascade="all", passive_deletes=True
    )
    wishlist_books: Mapped[List["WishlistBook"]] = relationship(
        "WishlistBook", uselist=True, back_populates="book", cascade="all", passive_deletes=True
    )
    store_inventory: Mapped[List["StoreInventory"]] = relationship(
        "StoreInventory", uselist=True, back_populates="book", cascade="all", passive_deletes=True
    )


class BookAuthor(Base):
    __tablename__ = "book_authors"
    __table_args__ = (
        ForeignKeyConstraint(
            ["book_id"], ["books.book_id"], ondelete="CASCADE", name="fk_ba_book"
        ),
        ForeignKeyConstraint(
            ["author_id"], ["authors.author_id"], ondelete="CASCADE", name="fk_ba_author"
        ),
        Index("ix_book_authors_author", "author_id"),
    )

    book_id = mapped_column(Integer, primary_key=True)
    author_id = mapped_column(Integer, primary_key=True)
    role = mapped_column(String(50), server_default="Author")

    book: Mapped["Book"] = relationship("Book", back_populates="book_authors")
    author: Mapped["Author"] = relationship("Author", back_populates="book_authors")


t_book_categories = Table(
    "book_categories",
    metadata,
    Column("book_id", Integer, primary_key=True, nullable=False),
    Column("category_id", Integer, primary_key=True, nullable=False),
    ForeignKeyConstraint(
        ["book_id"], ["books.book_id"], ondelete="CASCADE", name="fk_bc_book"
    ),
    ForeignKeyConstraint(
        ["category_id"],
        ["categories.category_id"],
        ondelete="CASCADE",
        name="fk_bc_category",
    ),
    Index("ix_book_categories_category", "category_id"),
)


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_customers_points"),
        Index("uq_customers_email", "email", unique=True),
    )

    customer_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name = mapped_column(String(50), nullable=False)
    last_name = mapped_column(String(50), nullable=False)
    email = mapped_column(String(100), nullable=False)
    phone = mapped_column(String(20))
    address = mapped_column(Text)
    city = mapped_column(String(50))
    state = mapped_column(String(50))
    postal_code = mapped_column(String(20))
    country = mapped_column(String(50))
    date_registered = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    is_member = mapped_column(Boolean, server_default=false())
    points = mapped_column(Integer, server_default=text("0"))

    orders: Mapped[List["Order"]] = relationship(
        "Order", uselist=True, back_populates="customer", passive_deletes=True
    )
    reviews: Mapped[List["Review"]] = relationship(
        "Review", uselist=True, back_populates="customer", cascade="all", passive_deletes=True
    )
    wishlists: Mapped[List["Wishlist"]] = relationship(
        "Wishlist", uselist=True, back_populates="customer", cascade="all", passive_deletes=True
    )
    gift_cards: Mapped[List["GiftCard"]] = relationship(
        "GiftCard", uselist=True, back_populates="customer", passive_deletes=True
    )
    event_registrations: Mapped[List["EventRegistration"]] = relationship(
        "EventRegistration",
        uselist=True,
        back_populates="customer",
        cascade="all",
        passive_deletes=True,
    )


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (
        ForeignKeyConstraint(
            ["manager_id"],
            ["employees.employee_id"],
            ondelete="SET NULL",
            name="fk_employee_manager",
        ),
        Index("uq_employees_email", "email", unique=True),
        Index("ix_employees_manager", "manager_id"),
    )

    employee_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name = mapped_column(String(50), nullable=False)
    last_name = mapped_column(String(50), nullable=False)
    email = mapped_column(String(100), nullable=False)
    phone = mapped_column(String(20))
    address = mapped_column(Text)
    position = mapped_column(String(50), nullable=False)
    salary = mapped_column(DECIMAL(10, 2))
    hire_date = mapped_column(Date, nullable=False)
    manager_id = mapped_column(Integer)

    manager: Mapped[Optional["Employee"]] = relationship(
        "Employee", remote_side=[employee_id], back_populates="subordinates"
    )
    subordinates: Mapped[List["Employee"]] = relationship(
        "Employee", uselist=True, back_populates="manager", passive_deletes=True
    )
    orders: Mapped[List["Order"]] = relationship(
        "Order", uselist=True, back_populates="employee", passive_deletes=True
    )
    purchases: Mapped[List["Purchase"]] = relationship(
        "Purchase", uselist=True, back_populates="employee", passive_deletes=True
    )
    managed_locations: Mapped[List["StoreLocation"]] = relationship(
        "StoreLocation", uselist=True, back_populates="manager", passive_deletes=True
    )


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        ForeignKeyConstraint(
            ["customer_id"],
            ["customers.customer_id"],
            ondelete="SET NULL",
            name="fk_order_customer",
        ),
        ForeignKeyConstraint(
            ["employee_id"],
            ["employees.employee_id"],
            ondelete="SET NULL",
            name="fk_order_employee",
        ),
        CheckConstraint("shipping_fee >= 0", name="ck_orders_shipping_fee"),
        CheckConstraint("total_amount >= 0", name="ck_orders_total_amount"),
        Index("ix_orders_customer", "customer_id", "order_date"),
        Index("ix_orders_employee", "employee_id"),
    )

    order_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id = mapped_column(Integer)
    employee_id = mapped_column(Integer)
    order_date = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    required_date = mapped_column(Date)
    shipped_date = mapped_column(Date)
    status = mapped_column(
        _enum_column_type(OrderStatus, "order_status"),
        server_default=OrderStatus.PENDING.value,
    )
    payment_method = mapped_column(_enum_column_type(PaymentMethod, "payment_method"))
    tracking_number = mapped_column(String(50))
    shipping_fee = mapped_column(DECIMAL(10, 2), server_default=text("'0.00'"))
    total_amount = mapped_column(DECIMAL(10, 2), nullable=False)

    customer: Mapped[Optional["Customer"]] = relationship("Customer", back_populates="orders")
    employee: Mapped[Optional["Employee"]] = relationship("Employee", back_populates="orders")
    order_details: Mapped[List["OrderDetail"]] = relationship(
        "OrderDetail", uselist=True, back_populates="order", cascade="all", passive_deletes=True
    )


class OrderDetail(Base):
    __tablename__ = "order_details"
    __table_args__ = (
        ForeignKeyConstraint(
            ["order_id"], ["orders.order_id"], ondelete="CASCADE", name="fk_od_order"
        ),
        ForeignKeyConstraint(
            ["book_id"], ["books.book_id"], ondelete="CASCADE", name="fk_od_book"
        ),
        CheckConstraint("quantity > 0", name="ck_order_details_quantity"),
        CheckConstraint("unit_price >= 0", name="ck_order_details_unit_price"),
        CheckConstraint(
            "discount >= 0 AND discount <= 100", name="ck_order_details_discount"
        ),
        Index("ix_order_details_book", "book_id"),
    )

    order_id = mapped_column(Integer, primary_key=True)
    book_id = mapped_column(Integer, primary_key=True)
    quantity = mapped_column(Integer, nullable=False)
    unit_price = mapped_column(DECIMAL(10, 2), nullable=False)
    discount = mapped_column(DECIMAL(5, 2), server_default=text("'0.00'"))

    order: Mapped["Order"] = relationship("Order", back_populates="order_details")
    book: Mapped["Book"] = relationship("Book", back_populates="order_details")


class Supplier(Base):
    __tablename__ = "suppliers"

    supplier_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    name = mapped_column(String(100), nullable=False)
    contact_person = mapped_column(String(100))
    email = mapped_column(String(100))
    phone = mapped_column(String(20))
    address = mapped_column(Text)
    city = mapped_column(String(50))
    country = mapped_column(String(50))
    date_added = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))

    purchases: Mapped[List["Purchase"]] = relationship(
        "Purchase", uselist=True, back_populates="supplier", passive_deletes=True
    )


class Purchase(Base):
    __tablename__ = "purchases"
    __table_args__ = (
        ForeignKeyConstraint(
            ["supplier_id"],
            ["suppliers.supplier_id"],
            ondelete="SET NULL",
            name="fk_purchase_supplier",
        ),
        ForeignKeyConstraint(
            ["employee_id"],
            ["employees.employee_id"],
            ondelete="SET NULL",
            name="fk_purchase_employee",
        ),
        CheckConstraint("total_amount >= 0", name="ck_purchases_total_amount"),
        Index("ix_purchases_supplier", "supplier_id"),
    )

    purchase_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    supplier_id = mapped_column(Integer)
    employee_id = mapped_column(Integer)
    purchase_date = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    status = mapped_column(
        _enum_column_type(PurchaseStatus, "purchase_status"),
        server_default=PurchaseStatus.ORDERED.value,
    )
    total_amount = mapped_column(DECIMAL(10, 2), nullable=False)

    supplier: Mapped[Optional["Supplier"]] = relationship("Supplier", back_populates="purchases")
    employee: Mapped[Optional["Employee"]] = relationship("Employee", back_populates="purchases")
    purchase_details: Mapped[List["PurchaseDetail"]] = relationship(
        "PurchaseDetail",
        uselist=True,
        back_populates="purchase",
        cascade="all",
        passive_deletes=True,
    )


class PurchaseDetail(Base):
    __tablename__ = "purchase_details"
    __table_args__ = (
        ForeignKeyConstraint(
            ["purchase_id"],
            ["purchases.purchase_id"],
            ondelete="CASCADE",
            name="fk_pd_purchase",
        ),
        ForeignKeyConstraint(
            ["book_id"], ["books.book_id"], ondelete="CASCADE", name="fk_pd_book"
        ),
        CheckConstraint("quantity > 0", name="ck_purchase_details_quantity"),
        CheckConstraint("unit_cost >= 0", name="ck_purchase_details_unit_cost"),
        Index("ix_purchase_details_book", "book_id"),
    )

    purchase_id = mapped_column(Integer, primary_key=True)
    book_id = mapped_column(Integer, primary_key=True)
    quantity = mapped_column(Integer, nullable=False)
    unit_cost = mapped_column(DECIMAL(10, 2), nullable=False)

    purchase: Mapped["Purchase"] = relationship("Purchase", back_populates="purchase_details")
    book: Mapped["Book"] = relationship("Book", back_populates="purchase_details")


class Promotion(Base):
    __tablename__ = "promotions"
    __table_args__ = (
        CheckConstraint(
            "discount_rate > 0 AND discount_rate <= 100",
            name="ck_promotions_discount_rate",
        ),
        CheckConstraint("end_date >= start_date", name="ck_promotions_dates"),
        CheckConstraint("min_purchase >= 0", name="ck_promotions_min_purchase"),
    )

    promotion_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    name = mapped_column(String(100), nullable=False)
    description = mapped_column(Text)
    discount_rate = mapped_column(DECIMAL(5, 2), nullable=False)
    start_date = mapped_column(Date, nullable=False)
    end_date = mapped_column(Date, nullable=False)
    is_active = mapped_column(Boolean, server_default=true())
    min_purchase = mapped_column(DECIMAL(10, 2), server_default=text("'0.00'"))

    books: Mapped[List["Book"]] = relationship(
        "Book", secondary="book_promotions", back_populates="promotions", passive_deletes=True
    )


t_book_promotions = Table(
    "book_promotions",
    metadata,
    Column("book_id", Integer, primary_key=True, nullable=False),
    Column("promotion_id", Integer, primary_key=True, nullable=False),
    ForeignKeyConstraint(
        ["book_id"], ["books.book_id"], ondelete="CASCADE", name="fk_bp_book"
    ),
    ForeignKeyConstraint(
        ["promotion_id"],
        ["promotions.promotion_id"],
        ondelete="CASCADE",
        name="fk_bp_promotion",
    ),
    Index("ix_book_promotions_promotion", "promotion_id"),
)


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        ForeignKeyConstraint(
            ["book_id"], ["books.book_id"], ondelete="CASCADE", name="fk_review_book"
        ),
        ForeignKeyConstraint(
            ["customer_id"],
            ["customers.customer_id"],
            ondelete="CASCADE",
            name="fk_review_customer",
        ),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating"),
        Index("ix_reviews_book", "book_id"),
        Index("ix_reviews_customer", "customer_id"),
    )

    review_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    book_id = mapped_column(Integer)
    customer_id = mapped_column(Integer)
    rating = mapped_column(Integer, nullable=False)
    review_text = mapped_column(Text)
    review_date = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    is_verified = mapped_column(Boolean, server_default=false())

    book: Mapped[Optional["Book"]] = relationship("Book", back_populates="reviews")
    customer: Mapped[Optional["Customer"]] = relationship("Customer", back_populates="reviews")


class Wishlist(Base):
    __tablename__ = "wishlists"
    __table_args__ = (
        ForeignKeyConstraint(
            ["customer_id"],
            ["customers.customer_id"],
            ondelete="CASCADE",
            name="fk_wishlist_customer",
        ),
        Index("ix_wishlists_customer", "customer_id"),
    )

    wishlist_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id = mapped_column(Integer)
    name = mapped_column(String(100), server_default="My Wishlist")
    created_date = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    is_public = mapped_column(Boolean, server_default=false())

    customer: Mapped[Optional["Customer"]] = relationship("Customer", back_populates="wishlists")
    wishlist_books: Mapped[List["WishlistBook"]] = relationship(
        "WishlistBook",
        uselist=True,
        back_populates="wishlist",
        cascade="all",
        passive_deletes=True,
    )


class WishlistBook(Base):
    __tablename__ = "wishlist_books"
    __table_args__ = (
        ForeignKeyConstraint(
            ["wishlist_id"],
            ["wishlists.wishlist_id"],
            ondelete="CASCADE",
            name="fk_wb_wishlist",
        ),
        ForeignKeyConstraint(
            ["book_id"], ["books.book_id"], ondelete="CASCADE", name="fk_wb_book"
        ),
        Index("ix_wishlist_books_book", "book_id"),
    )

    wishlist_id = mapped_column(Integer, primary_key=True)
    book_id = mapped_column(Integer, primary_key=True)
    date_added = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    notes = mapped_column(Text)

    wishlist: Mapped["Wishlist"] = relationship("Wishlist", back_populates="wishlist_books")
    book: Mapped["Book"] = relationship("Book", back_populates="wishlist_books")


class StoreLocation(Base):
    __tablename__ = "store_locations"
    __table_args__ = (
        ForeignKeyConstraint(
            ["manager_id"],
            ["employees.employee_id"],
            ondelete="SET NULL",
            name="fk_location_manager",
        ),
        Index("ix_store_locations_manager", "manager_id"),
    )

    location_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    name = mapped_column(String(100), nullable=False)
    address = mapped_column(Text, nullable=False)
    city = mapped_column(String(50), nullable=False)
    state = mapped_column(String(50))
    postal_code = mapped_column(String(20), nullable=False)
    country = mapped_column(String(50), nullable=False)
    phone = mapped_column(String(20))
    email = mapped_column(String(100))
    manager_id = mapped_column(Integer)
    opening_hours = mapped_column(Text)

    manager: Mapped[Optional["Employee"]] = relationship(
        "Employee", back_populates="managed_locations"
    )
    inventory: Mapped[List["StoreInventory"]] = relationship(
        "StoreInventory",
        uselist=True,
        back_populates="location",
        cascade="all",
        passive_deletes=True,
    )
    events: Mapped[List["Event"]] = relationship(
        "Event", uselist=True, back_populates="location", passive_deletes=True
    )


class StoreInventory(Base):
    __tablename__ = "store_inventory"
    __table_args__ = (
        ForeignKeyConstraint(
            ["location_id"],
            ["store_locations.location_id"],
            ondelete="CASCADE",
            name="fk_si_location",
        ),
        ForeignKeyConstraint(
            ["book_id"], ["books.book_id"], ondelete="CASCADE", name="fk_si_book"
        ),
        CheckConstraint("quantity >= 0", name="ck_store_inventory_quantity"),
        Index("ix_store_inventory_book", "book_id"),
    )

    location_id = mapped_column(Integer, primary_key=True)
    book_id = mapped_column(Integer, primary_key=True)
    quantity = mapped_column(Integer, nullable=False, server_default=text("0"))
    shelf_location = mapped_column(String(50))
    last_updated = mapped_column(
        TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"), onupdate=func.now()
    )

    location: Mapped["StoreLocation"] = relationship("StoreLocation", back_populates="inventory")
    book: Mapped["Book"] = relationship("Book", back_populates="store_inventory")


class GiftCard(Base):
    __tablename__ = "gift_cards"
    __table_args__ = (
        ForeignKeyConstraint(
            ["customer_id"],
            ["customers.customer_id"],
            ondelete="SET NULL",
            name="fk_giftcard_customer",
        ),
        CheckConstraint("initial_amount > 0", name="ck_gift_cards_initial_amount"),
        CheckConstraint("current_balance >= 0", name="ck_gift_cards_current_balance"),
        CheckConstraint("expiry_date > issue_date", name="ck_gift_cards_expiry"),
        Index("ix_gift_cards_customer", "customer_id"),
    )

    card_number = mapped_column(String(50), primary_key=True)
    initial_amount = mapped_column(DECIMAL(10, 2), nullable=False)
    current_balance = mapped_column(DECIMAL(10, 2), nullable=False)
    issue_date = mapped_column(Date, nullable=False)
    expiry_date = mapped_column(Date)
    is_active = mapped_column(Boolean, server_default=true())
    customer_id = mapped_column(Integer)

    customer: Mapped[Optional["Customer"]] = relationship("Customer", back_populates="gift_cards")


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        ForeignKeyConstraint(
            ["location_id"],
            ["store_locations.location_id"],
            ondelete="SET NULL",
            name="fk_event_location",
        ),
        CheckConstraint("capacity > 0", name="ck_events_capacity"),
        CheckConstraint("end_time > start_time", name="ck_events_times"),
        Index("ix_events_location", "location_id", "event_date"),
    )

    event_id = mapped_column(Integer, primary_key=True, autoincrement=True)
    title = mapped_column(String(100), nullable=False)
    description = mapped_column(Text)
    event_date = mapped_column(Date, nullable=False)
    start_time = mapped_column(Time, nullable=False)
    end_time = mapped_column(Time)
    location_id = mapped_column(Integer)
    capacity = mapped_column(Integer)
    registration_required = mapped_column(Boolean, server_default=false())
    contact_email = mapped_column(String(100))
    contact_phone = mapped_column(String(20))

    location: Mapped[Optional["StoreLocation"]] = relationship(
        "StoreLocation", back_populates="events"
    )
    registrations: Mapped[List["EventRegistration"]] = relationship(
        "EventRegistration",
        uselist=True,
        back_populates="event",
        cascade="all",
        passive_deletes=True,
    )


class EventRegistration(Base):
    __tablename__ = "event_registrations"
    __table_args__ = (
        ForeignKeyConstraint(
            ["event_id"], ["events.event_id"], ondelete="CASCADE", name="fk_er_event"
        ),
        ForeignKeyConstraint(
            ["customer_id"],
            ["customers.customer_id"],
            ondelete="CASCADE",
            name="fk_er_customer",
        ),
        Index("ix_event_registrations_customer", "customer_id"),
    )

    event_id = mapped_column(Integer, primary_key=True)
    customer_id = mapped_column(Integer, primary_key=True)
    registration_date = mapped_column(TIMESTAMP, server_default=text("CURRENT_TIMESTAMP"))
    attendance_status = mapped_column(
        _enum_column_type(AttendanceStatus, "attendance_status"),
        server_default=AttendanceStatus.REGISTERED.value,
    )
    notes = mapped_column(Text)

    event: Mapped["Event"] = relationship("Event", back_populates="registrations")
    customer: Mapped["Customer"] = relationship(
        "Customer", back_populates="event_registrations"
    )
