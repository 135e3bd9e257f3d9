# aqua_bridge/routes/market_routes.py

from flask import Blueprint, jsonify, request

from aqua_bridge.errors import AquaBridgeError
from aqua_bridge.routes.responses import error_response
from aqua_bridge.services.container import get_services

market_bp = Blueprint("market", __name__)


# -----------------------------------------
# MARKET STATUS
# -----------------------------------------
@market_bp.get("/market-status")
def get_market_status():
    try:
        status = get_services().market.get_status()
        return jsonify({"success": True, "status": status})
    except AquaBridgeError as e:
        return error_response(e)


@market_bp.post("/market-status")
def update_market_status():
    try:
        status = get_services().market.set_status(request.get_json(silent=True))
        return jsonify({"success": True, "status": status})
    except AquaBridgeError as e:
        return error_response(e)


# -----------------------------------------
# MARKET PRICES
# -----------------------------------------
@market_bp.get("/market-prices")
def list_market_prices():
    try:
        prices = get_services().market.list_prices()
        return jsonify({"success": True, "prices": prices})
    except AquaBridgeError as e:
        return error_response(e)


@market_bp.patch("/market-prices")
def update_market_price():
    try:
        price = get_services().market.update_price(request.get_json(silent=True))
        return jsonify({"success": True, "price": price})
    except AquaBridgeError as e:
        return error_response(e)
