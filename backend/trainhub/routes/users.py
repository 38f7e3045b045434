# Overview: Flask API routes for the per-user inventory record.

from flask import Blueprint, request, jsonify, current_app

from ..services import user_service
from ..services.user_service import UserNotFoundError
from ..validation import ValidationError, normalize_email


users_bp = Blueprint("users", __name__, url_prefix="/api")


@users_bp.get("/user")
def get_user_route():
    """Return the user's principal fields plus both inventory lists."""
    email = normalize_email(request.args.get("email"))
    if not email:
        return jsonify({"ok": False, "error": "email required"})

    user = user_service.get_user(email)
    if user is None:
        return jsonify({"ok": False, "error": "user not found"})

    return jsonify({"ok": True, "user": user.to_dict()})


@users_bp.post("/user")
def update_user_route():
    """
    Save the inventory record.

    Body: {email, inventory?, deleted_inventory?}. Each list given replaces
    the stored list wholesale.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"ok": False, "error": "invalid request body"}), 400

    try:
        user = user_service.save_inventory(
            data.get("email"),
            inventory=data.get("inventory"),
            deleted_inventory=data.get("deleted_inventory"),
        )
    except (ValidationError, UserNotFoundError) as e:
        return jsonify({"ok": False, "error": str(e)})
    except Exception:
        current_app.logger.exception("Failed to update inventory")
        return jsonify({"ok": False, "error": "failed to update"})

    return jsonify({"ok": True, "user": user.to_dict()})


@users_bp.get("/inventories")
def list_inventories_route():
    return jsonify({"ok": True, "inventories": user_service.list_inventories()})
