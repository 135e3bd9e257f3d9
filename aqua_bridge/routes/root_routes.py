# aqua_bridge/routes/root_routes.py

from flask import Blueprint, jsonify

root_bp = Blueprint("root", __name__)


# -----------------------------
# HEALTH
# -----------------------------
@root_bp.get("/")
def health():
    return jsonify({"ok": True, "msg": "Aqua Bridge API alive"})
