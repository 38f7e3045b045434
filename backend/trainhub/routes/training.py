# Overview: Flask API routes for training documents and their recycling bin.

# backend/trainhub/routes/training.py
"""
Training API routes

Lifecycle endpoints (delete/restore/permanent-delete) take {id, email};
the email is the acting principal and must match the creator.

Domain failures come back as {"ok": false, "error": msg, "code": code}
where code is one of: validation, not_found, forbidden, lifecycle.
"""

from flask import Blueprint, request, jsonify, current_app

from ..lifecycle import LifecycleError
from ..services import training_service
from ..services.training_service import OwnershipError, TrainingNotFoundError
from ..validation import ValidationError


training_bp = Blueprint("training", __name__, url_prefix="/api")

ERROR_CODES = (
    (ValidationError, "validation"),
    (TrainingNotFoundError, "not_found"),
    (OwnershipError, "forbidden"),
    (LifecycleError, "lifecycle"),
)
DOMAIN_ERRORS = tuple(cls for cls, _ in ERROR_CODES)


def _domain_error(e: Exception):
    code = next(code for cls, code in ERROR_CODES if isinstance(e, cls))
    return jsonify({"ok": False, "error": str(e), "code": code})


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


@training_bp.get("/trainings")
def list_trainings_route():
    """All active (non-deleted) trainings."""
    trainings = training_service.list_active()
    return jsonify({"ok": True, "trainings": [t.to_dict() for t in trainings]})


@training_bp.post("/trainings")
def create_training_route():
    """Create a training. The creator's email comes from ?email=."""
    data = _json_body()
    if data is None:
        return jsonify({"ok": False, "error": "invalid request body"}), 400

    try:
        training = training_service.create_training(
            created_by=request.args.get("email"),
            title=data.get("title"),
            description=data.get("description"),
            thumbnail_url=data.get("thumbnail_url"),
            blocks=data.get("blocks"),
        )
    except DOMAIN_ERRORS as e:
        return _domain_error(e)
    except Exception:
        current_app.logger.exception("Failed to create training")
        return jsonify({"ok": False, "error": "failed to create training"})

    return jsonify({"ok": True, "training": training.to_dict()})


@training_bp.get("/trainings/deleted")
def list_deleted_trainings_route():
    """Recycling bin for ?email=."""
    try:
        trainings = training_service.list_deleted(request.args.get("email"))
    except ValidationError as e:
        return _domain_error(e)
    return jsonify({"ok": True, "trainings": [t.to_dict() for t in trainings]})


@training_bp.get("/training")
def get_training_route():
    try:
        training = training_service.get_training(request.args.get("id"))
    except (ValidationError, TrainingNotFoundError) as e:
        return _domain_error(e)
    return jsonify({"ok": True, "training": training.to_dict()})


@training_bp.post("/training/update")
def update_training_route():
    data = _json_body()
    if data is None:
        return jsonify({"ok": False, "error": "invalid request body"}), 400

    try:
        training = training_service.update_training(
            data.get("id"),
            email=data.get("email"),
            title=data.get("title"),
            description=data.get("description"),
            thumbnail_url=data.get("thumbnail_url"),
            blocks=data.get("blocks"),
        )
    except DOMAIN_ERRORS as e:
        return _domain_error(e)
    except Exception:
        current_app.logger.exception("Failed to update training")
        return jsonify({"ok": False, "error": "failed to update training"})

    return jsonify({"ok": True, "training": training.to_dict()})


def _lifecycle_route(operation, failure_message: str):
    data = _json_body()
    if data is None:
        return jsonify({"ok": False, "error": "invalid request body"}), 400

    try:
        operation(data.get("id"), email=data.get("email"))
    except DOMAIN_ERRORS as e:
        return _domain_error(e)
    except Exception:
        current_app.logger.exception(failure_message)
        return jsonify({"ok": False, "error": failure_message})

    return jsonify({"ok": True})


@training_bp.post("/training/delete")
def delete_training_route():
    """Soft delete - moves the training to the recycling bin."""
    return _lifecycle_route(training_service.delete_training, "failed to delete training")


@training_bp.post("/training/restore")
def restore_training_route():
    return _lifecycle_route(training_service.restore_training, "failed to restore training")


@training_bp.post("/training/permanent-delete")
def permanent_delete_training_route():
    """Irreversible. The training must already be in the recycling bin."""
    return _lifecycle_route(training_service.purge_training, "failed to delete training")
