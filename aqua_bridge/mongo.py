# aqua_bridge/mongo.py
from __future__ import annotations

from flask_pymongo import PyMongo

mongo = PyMongo()


def init_mongo(app):
    """
    Initializes Flask-PyMongo and returns the application database.
    Requires app.config["MONGO_URI"]; returns None when it is not set.
    Call this during app startup (create_app).
    """

    # If missing, don't crash the app; routes answer 500 until configured
    if not app.config.get("MONGO_URI"):
        app.logger.warning("MONGO_URI not set. Mongo will not be initialized.")
        return None

    mongo.init_app(app)

    # the URI may omit the database name; fall back to DB_NAME
    db = mongo.db
    if db is None:
        db = mongo.cx[app.config.get("DB_NAME", "aqua_bridge")]

    app.logger.info("Mongo initialized: %s", db.name)
    return db
