# aqua_bridge/app_config.py

import os

from dotenv import load_dotenv


def _flag(name: str, default: str = "0") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


def load_config(app, overrides=None):
    """
    Load all Flask configuration in a clean centralized way.
    Values come from the environment (and .env if present); overrides win.
    """
    load_dotenv()

    # ------------------------------
    # Mongo
    # ------------------------------
    # no default: without MONGO_URI the API starts and answers 500 on data routes
    app.config["MONGO_URI"] = os.getenv("MONGO_URI")
    app.config["DB_NAME"] = os.getenv("DB_NAME", "aqua_bridge")
    app.config["HARVEST_COLLECTION"] = os.getenv("HARVEST_COLLECTION", "harvest_requests")
    app.config["PRICES_COLLECTION"] = os.getenv("PRICES_COLLECTION", "market_prices")
    app.config["META_COLLECTION"] = os.getenv("META_COLLECTION", "app_meta")
    app.config["OTP_COLLECTION"] = os.getenv("OTP_COLLECTION", "otp_codes")

    # ------------------------------
    # CORS
    # ------------------------------
    app.config["FRONTEND_ORIGIN"] = os.getenv("FRONTEND_ORIGIN", "http://localhost:3000")

    # ------------------------------
    # Twilio (SMS). Leave unset to echo codes back (demo mode).
    # ------------------------------
    app.config["TWILIO_ACCOUNT_SID"] = os.getenv("TWILIO_ACCOUNT_SID")
    app.config["TWILIO_AUTH_TOKEN"] = os.getenv("TWILIO_AUTH_TOKEN")
    app.config["TWILIO_PHONE_NUMBER"] = os.getenv("TWILIO_PHONE_NUMBER")
    app.config["SMS_TIMEOUT"] = int(os.getenv("SMS_TIMEOUT", "15"))

    # ------------------------------
    # OTP
    # ------------------------------
    app.config["OTP_TTL_SECONDS"] = int(os.getenv("OTP_TTL_SECONDS", "300"))
    app.config["OTP_STORE"] = os.getenv("OTP_STORE", "memory").strip().lower()
    app.config["OTP_ROLLBACK_ON_DELIVERY_FAILURE"] = _flag("OTP_ROLLBACK_ON_DELIVERY_FAILURE")
    app.config["DEFAULT_COUNTRY_CODE"] = os.getenv("DEFAULT_COUNTRY_CODE", "91")

    # ------------------------------
    # Server
    # ------------------------------
    app.config["PORT"] = int(os.getenv("PORT", "5000"))

    if overrides:
        app.config.update(overrides)

    app.logger.info("Config loaded (db=%s, otp_store=%s)", app.config["DB_NAME"], app.config["OTP_STORE"])
