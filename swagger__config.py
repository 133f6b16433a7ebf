"""
Swagger/OpenAPI configuration for the Bookstore Reports API
"""

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec",
            "route": "/apispec.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/api/docs",
}

SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Bookstore Reports API",
        "description": "Read-only reports over the bookstore schema: catalog, inventory, sales and staff hierarchy",
        "version": "1.0.0",
    },
    "host": "",
    "basePath": "/",
    "schemes": ["http", "https"],
    "tags": [
        {"name": "Catalog", "description": "Authors, categories, promotions and reviews"},
        {"name": "Inventory", "description": "Per-location stock and drift from stock_quantity"},
        {"name": "Sales", "description": "Orders and revenue"},
        {"name": "Staff", "description": "Employee reporting lines"},
        {"name": "Utility", "description": "Service status"},
    ],
    "definitions": {
        "Error": {
            "type": "object",
            "properties": {
                "status": {"type": "string", "example": "error"},
                "message": {"type": "string"},
                "details": {"type": "string"},
            },
        },
        "ConstraintViolation": {
            "type": "object",
            "properties": {
                "status": {"type": "string", "example": "error"},
                "error": {
                    "type": "string",
                    "enum": [
                        "uniqueness",
                        "check",
                        "referential",
                        "enumeration",
                        "not_null",
                        "hierarchy_cycle",
                    ],
                },
                "message": {"type": "string"},
                "constraint": {"type": "string"},
                "table": {"type": "string"},
            },
        },
        "BookRevenue": {
            "type": "object",
            "properties": {
                "book_id": {"type": "integer"},
                "title": {"type": "string"},
                "units": {"type": "integer"},
                "revenue": {"type": "number", "format": "float"},
            },
        },
        "InventoryRow": {
            "type": "object",
            "properties": {
                "location_id": {"type": "integer"},
                "location": {"type": "string"},
                "city": {"type": "string"},
                "quantity": {"type": "integer"},
                "shelf_location": {"type": "string"},
            },
        },
    },
}
