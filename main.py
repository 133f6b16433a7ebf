from bookstore.routes.reports import reports_bp
from bookstore.commands import COMMANDS
from bookstore.errors import ConstraintViolation, UniquenessViolation
from flask import Flask, jsonify
from flask_cors import CORS
from flasgger import Swagger
from swagger__config import SWAGGER_CONFIG, SWAGGER_TEMPLATE
import os

from bookstore.config import Config
from bookstore.extensions import db


def register_error_handlers(app):
    @app.errorhandler(ConstraintViolation)
    def handle_constraint_violation(e):
        db.session.rollback()
        app.logger.error(f"Rejected write ({e.kind}): {e.message}")
        status = 409 if isinstance(e, UniquenessViolation) else 400
        return jsonify(e.to_dict()), status


def create_app(overrides=None):
    print("Starting create_app()")
    app = Flask(__name__)
    try:
        app.config.from_object(Config)
        if overrides:
            app.config.update(overrides)
        print(f"Config loaded: {len(app.config)} items")

        CORS(app)

        db.init_app(app)
        print("Database initialized")

        host = os.environ.get("API_HOST", "127.0.0.1:5000")
        swagger_template = SWAGGER_TEMPLATE.copy()
        swagger_template["host"] = host
        Swagger(app, config=SWAGGER_CONFIG, template=swagger_template)
        print("Swagger initialized - Access at /api/docs")

        blueprints = [reports_bp]
        for bp in blueprints:
            app.register_blueprint(bp)
            print(f"  ✓ {bp.name} registered")

        for command in COMMANDS:
            app.cli.add_command(command)

        register_error_handlers(app)

        @app.route("/")
        def home():
            """
            Root endpoint - API status
            ---
            tags:
              - Utility
            responses:
              200:
                description: API is running
            """
            return {"status": "ok", "message": "Bookstore backend is running!"}, 200

    except Exception as e:
        print(f"Error during app creation: {e}")
        import traceback

        print(f"Full traceback: {traceback.format_exc()}")
        raise

    print("create_app() completed successfully")
    return app


app = create_app()


if __name__ == "__main__":
    # Create a .env containing:
    #       BOOKSTORE_DATABASE_URL=mysql+pymysql://<USER>:<PASSWORD>@<HOST>:<PORT>/bookstore
    port = int(os.environ.get("PORT", 5000))
    app.run(
        host="0.0.0.0", port=port, debug=os.environ.get("FLASK_ENV") != "production"
    )
