# Overview: Flask API routes for signup and login; parses input and returns JSON responses.

# backend/trainhub/routes/auth.py
"""
Authentication API routes

There is no server session: a successful signup/login returns the
principal ({name, email}) and the client keeps it in local storage.
Application failures are reported as 200 {"ok": false, "error": ...}
so the client can tell them apart from transport failures.
"""

from flask import Blueprint, request, jsonify, current_app

from ..services import user_service
from ..services.user_service import AccountExistsError
from ..validation import ValidationError


auth_bp = Blueprint("auth", __name__, url_prefix="/api")


@auth_bp.post("/signup")
def signup_route():
    """Create an account and return the principal."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"ok": False, "error": "invalid request body"}), 400

    try:
        user = user_service.signup(
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
        )
    except (ValidationError, AccountExistsError) as e:
        return jsonify({"ok": False, "error": str(e)})
    except Exception:
        current_app.logger.exception("Failed to create account")
        return jsonify({"ok": False, "error": "failed to create account"})

    return jsonify({"ok": True, "user": user.to_principal()})


@auth_bp.post("/login")
def login_route():
    """Verify credentials and return the principal."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"ok": False, "error": "invalid request body"}), 400

    try:
        user = user_service.authenticate(data.get("email"), data.get("password"))
    except ValidationError as e:
        return jsonify({"ok": False, "error": str(e)})

    if user is None:
        return jsonify({"ok": False, "error": "invalid credentials"})

    return jsonify({"ok": True, "user": user.to_principal()})
