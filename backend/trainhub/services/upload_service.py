# Overview: Storage of uploaded training media (videos, thumbnails/images).

from __future__ import annotations

import os
import uuid
from dataclasses import dataclass

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..validation import ValidationError


ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}


@dataclass(frozen=True)
class UploadKind:
    name: str            # "video" / "image"
    subdir: str          # directory under UPLOAD_FOLDER and URL segment
    max_bytes_key: str   # config key holding the size cap
    type_error: str

    def accepts(self, content_type: str) -> bool:
        if self.name == "video":
            return content_type.startswith("video/")
        return content_type in ALLOWED_IMAGE_TYPES


VIDEO = UploadKind("video", "videos", "MAX_VIDEO_BYTES", "file must be a video")
IMAGE = UploadKind("image", "images", "MAX_IMAGE_BYTES", "file must be an image (JPEG, PNG, GIF, or WebP)")

KINDS = {"video": VIDEO, "image": IMAGE}


def upload_dir(kind: UploadKind) -> str:
    path = os.path.join(current_app.config["UPLOAD_FOLDER"], kind.subdir)
    os.makedirs(path, exist_ok=True)
    return path


def save_upload(file: FileStorage | None, kind: UploadKind) -> str:
    """
    Validate and store an uploaded file. Returns its public URL
    (/uploads/<subdir>/<uuid>_<name>).

    Raises:
        ValidationError: missing file, wrong content type, or too large
    """
    if file is None or not file.filename:
        raise ValidationError("no file uploaded")

    content_type = (file.mimetype or "").lower()
    if not kind.accepts(content_type):
        raise ValidationError(kind.type_error)

    max_bytes = current_app.config[kind.max_bytes_key]
    data = file.stream.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise ValidationError("file too large or invalid")

    filename = f"{uuid.uuid4()}_{secure_filename(file.filename) or kind.name}"
    with open(os.path.join(upload_dir(kind), filename), "wb") as fh:
        fh.write(data)

    current_app.logger.info("Stored %s upload %s (%d bytes)", kind.name, filename, len(data))
    return f"/uploads/{kind.subdir}/{filename}"
