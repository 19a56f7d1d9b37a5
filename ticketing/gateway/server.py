"""
API gateway: combines auth, partners, customers, and events blueprints.
This is the local entrypoint for development.
"""

from flask import Flask, jsonify
from flask_cors import CORS
import os
import logging
from dotenv import load_dotenv

load_dotenv()

# Basic console logging during API requests
logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")


def _cors_origins():
    raw = os.getenv("CORS_ORIGINS", "*")
    if raw.strip() == "*":
        return "*"
    return [o.strip() for o in raw.split(",") if o.strip()]


def create_app() -> Flask:
    """
    Application factory for creating the Flask app.

    Returns:
        Flask: The configured Flask application.
    """
    from ticketing.auth_service.middleware import init_auth
    from ticketing.auth_service.routes import auth_bp
    from ticketing.customers_service.routes import customers_bp
    from ticketing.errors import register_error_handlers
    from ticketing.events_service.routes import events_bp
    from ticketing.partners_service.routes import partners_bp

    app = Flask(__name__)
    CORS(app, resources={
        r"/*": {
            "origins": _cors_origins(),
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }
    })

    # Authentication runs before every request, ahead of the blueprints
    init_auth(app)
    register_error_handlers(app)

    # --- REGISTER BLUEPRINTS ---
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(partners_bp, url_prefix="/partners")
    app.register_blueprint(customers_bp, url_prefix="/customers")
    app.register_blueprint(events_bp, url_prefix="/events")

    logging.info("All blueprints registered successfully.")

    # --- BASIC HEALTH CHECKPOINT ---
    @app.route("/")
    def ping():
        """
        Root URL for a simple 'online' check. Requires a valid token.
        """
        return jsonify({"message": "Hello World!"}), 200

    return app


if __name__ == "__main__":
    app = create_app()
    port = int(os.getenv("GATEWAY_PORT", 5050))
    app.run(host="0.0.0.0", port=port, debug=os.getenv("FLASK_DEBUG") == "1")
