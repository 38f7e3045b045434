# Overview: Flask routes for media uploads and serving uploaded files.

from flask import Blueprint, request, jsonify, current_app, send_from_directory
from werkzeug.exceptions import RequestEntityTooLarge

from ..services import upload_service
from ..services.upload_service import IMAGE, VIDEO
from ..validation import ValidationError


uploads_bp = Blueprint("uploads", __name__)


def _upload(kind, url_key: str):
    try:
        file = request.files.get(kind.name)
    except RequestEntityTooLarge:
        return jsonify({"ok": False, "error": "file too large or invalid"})

    try:
        url = upload_service.save_upload(file, kind)
    except ValidationError as e:
        return jsonify({"ok": False, "error": str(e)})
    except OSError:
        current_app.logger.exception("Failed to store %s upload", kind.name)
        return jsonify({"ok": False, "error": "failed to save file"})

    return jsonify({"ok": True, url_key: url})


@uploads_bp.post("/api/upload-video")
def upload_video_route():
    """Multipart field `video`, max 50MB, any video/* type."""
    return _upload(VIDEO, "video_url")


@uploads_bp.post("/api/upload-image")
def upload_image_route():
    """Multipart field `image`, max 10MB, JPEG/PNG/GIF/WebP."""
    return _upload(IMAGE, "image_url")


@uploads_bp.get("/uploads/<kind>/<path:filename>")
def serve_upload_route(kind: str, filename: str):
    kinds = {k.subdir: k for k in upload_service.KINDS.values()}
    if kind not in kinds:
        return jsonify({"ok": False, "error": "not found"}), 404
    return send_from_directory(upload_service.upload_dir(kinds[kind]), filename)
