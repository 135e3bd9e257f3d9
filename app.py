# app.py (gunicorn app:app, or python app.py locally)

import logging

from flask import Flask
from flask_cors import CORS

from aqua_bridge.app_config import load_config
from aqua_bridge.mongo import init_mongo
from aqua_bridge.register_blueprints import register_all_blueprints
from aqua_bridge.routes.responses import error_response
from aqua_bridge.services.container import build_services

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def create_app(test_config=None, db=None, otp_store=None, sms_provider=None):
    """
    Build the API. Tests pass a mongomock database, an in-memory OTP store
    and a fake SMS provider; production reads everything from the environment.
    """
    app = Flask(__name__)

    # -------------------------
    # Config
    # -------------------------
    load_config(app, test_config)

    CORS(app, resources={r"/*": {"origins": app.config["FRONTEND_ORIGIN"]}}, supports_credentials=True)

    # -------------------------
    # Mongo
    # -------------------------
    if db is None:
        db = init_mongo(app)

    # -------------------------
    # Services (OTP store, SMS, documents)
    # -------------------------
    build_services(app, db, otp_store=otp_store, sms_provider=sms_provider)

    # -------------------------
    # Blueprints
    # -------------------------
    register_all_blueprints(app)

    @app.errorhandler(Exception)
    def _unhandled(e):
        return error_response(e)

    return app


# gunicorn entrypoint
app = create_app()


# Local run only
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.config["PORT"], debug=False)
