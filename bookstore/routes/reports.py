# bookstore/routes/reports.py
from datetime import date

from flask import Blueprint, current_app, jsonify, request

from bookstore.extensions import db
from bookstore.models import Author, Book, Employee
from bookstore.services import reports
from bookstore.services.hierarchy import category_path, reporting_chain

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _date_arg(name):
    value = request.args.get(name)
    if not value:
        return None
    return date.fromisoformat(value)


def _bad_request(message):
    return jsonify({"status": "error", "message": message}), 400


@reports_bp.route("/authors/<int:author_id>/books", methods=["GET"])
def get_books_by_author(author_id):
    """
    Books written by an author
    ---
    tags:
      - Catalog
    parameters:
      - name: author_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: Books linked to the author through book_authors
      404:
        description: Author not found
        schema:
          $ref: '#/definitions/Error'
    """
    author = db.session.get(Author, author_id)
    if not author:
        return jsonify({"status": "error", "message": "Author not found"}), 404

    return jsonify(
        {
            "author_id": author_id,
            "author": f"{author.first_name} {author.last_name}",
            "books": reports.books_by_author(author_id),
        }
    )


@reports_bp.route("/books/<int:book_id>/inventory", methods=["GET"])
def get_book_inventory(book_id):
    """
    Per-location stock of a book
    ---
    tags:
      - Inventory
    parameters:
      - name: book_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: Store inventory rows plus the book's own stock_quantity
      404:
        description: Book not found
        schema:
          $ref: '#/definitions/Error'
    """
    book = db.session.get(Book, book_id)
    if not book:
        return jsonify({"status": "error", "message": "Book not found"}), 404

    locations = reports.inventory_for_book(book_id)
    return jsonify(
        {
            "book_id": book_id,
            "isbn": book.isbn,
            "stock_quantity": book.stock_quantity,
            "located_quantity": sum(row["quantity"] for row in locations),
            "locations": locations,
        }
    )


@reports_bp.route("/books/<int:book_id>/orders", methods=["GET"])
def get_book_orders(book_id):
    """
    Order lines for a book
    ---
    tags:
      - Sales
    parameters:
      - name: book_id
        in: path
        type: integer
        required: true
      - name: start
        in: query
        type: string
        format: date
      - name: end
        in: query
        type: string
        format: date
    responses:
      200:
        description: Orders containing the book within the date range
      400:
        description: Invalid date
        schema:
          $ref: '#/definitions/Error'
      404:
        description: Book not found
        schema:
          $ref: '#/definitions/Error'
    """
    if not db.session.get(Book, book_id):
        return jsonify({"status": "error", "message": "Book not found"}), 404

    try:
        start, end = _date_arg("start"), _date_arg("end")
    except ValueError as e:
        return _bad_request(f"Invalid date: {e}")

    return jsonify({"book_id": book_id, "orders": reports.orders_for_book(book_id, start, end)})


@reports_bp.route("/revenue", methods=["GET"])
def get_revenue_by_book():
    """
    Discounted revenue per book
    ---
    tags:
      - Sales
    parameters:
      - name: start
        in: query
        type: string
        format: date
      - name: end
        in: query
        type: string
        format: date
    responses:
      200:
        description: SUM(quantity * unit_price * (1 - discount/100)) grouped by book
    """
    try:
        start, end = _date_arg("start"), _date_arg("end")
    except ValueError as e:
        return _bad_request(f"Invalid date: {e}")

    rows = reports.revenue_by_book(start, end)
    return jsonify(
        {
            "totalRevenue": round(sum(row["revenue"] for row in rows), 2),
            "books": rows,
        }
    )


@reports_bp.route("/categories/ratings", methods=["GET"])
def get_category_ratings():
    """
    Average review rating per category
    ---
    tags:
      - Catalog
    responses:
      200:
        description: AVG and COUNT of reviews through book_categories
    """
    return jsonify({"categories": reports.category_ratings()})


@reports_bp.route("/categories/<int:category_id>/path", methods=["GET"])
def get_category_path(category_id):
    """
    Category ancestry from the root
    ---
    tags:
      - Catalog
    responses:
      200:
        description: Category names, root first
    """
    path = category_path(category_id)
    if not path:
        return jsonify({"status": "error", "message": "Category not found"}), 404
    return jsonify({"category_id": category_id, "path": path})


@reports_bp.route("/employees/<int:employee_id>/chain", methods=["GET"])
def get_reporting_chain(employee_id):
    """
    Managers above an employee
    ---
    tags:
      - Staff
    responses:
      200:
        description: Direct manager first
      404:
        description: Employee not found
        schema:
          $ref: '#/definitions/Error'
    """
    if not db.session.get(Employee, employee_id):
        return jsonify({"status": "error", "message": "Employee not found"}), 404

    return jsonify({"employee_id": employee_id, "managers": reporting_chain(employee_id)})


@reports_bp.route("/customers/top", methods=["GET"])
def get_top_customers():
    """
    Customers ranked by order value
    ---
    tags:
      - Sales
    parameters:
      - name: limit
        in: query
        type: integer
    responses:
      200:
        description: Top customers by SUM(total_amount)
    """
    limit = request.args.get(
        "limit", default=current_app.config.get("REPORT_DEFAULT_LIMIT", 5), type=int
    )
    if limit is None or limit < 1:
        return _bad_request("limit must be a positive integer")

    try:
        start, end = _date_arg("start"), _date_arg("end")
    except ValueError as e:
        return _bad_request(f"Invalid date: {e}")

    return jsonify({"customers": reports.top_customers(limit, start, end)})


@reports_bp.route("/inventory/discrepancies", methods=["GET"])
def get_inventory_discrepancies():
    """
    Books whose stock_quantity disagrees with store inventory
    ---
    tags:
      - Inventory
    parameters:
      - name: include_untracked
        in: query
        type: boolean
    responses:
      200:
        description: Drift between the two independently maintained figures
    """
    include_untracked = request.args.get("include_untracked", "false").lower() == "true"
    return jsonify(
        {"discrepancies": reports.inventory_discrepancies(include_untracked=include_untracked)}
    )


@reports_bp.route("/promotions/active", methods=["GET"])
def get_active_promotions():
    """
    Promotions running on a date
    ---
    tags:
      - Catalog
    parameters:
      - name: on
        in: query
        type: string
        format: date
    responses:
      200:
        description: Active promotions with the ISBNs they cover
    """
    try:
        on_date = _date_arg("on")
    except ValueError as e:
        return _bad_request(f"Invalid date: {e}")

    return jsonify({"promotions": reports.active_promotions(on_date)})
