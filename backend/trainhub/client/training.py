# Overview: Training store, uploads, and the in-progress draft used by the editor.

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from ..blocks import make_block, move_block, normalize_blocks, remove_block, renumber
from ..validation import ValidationError, validate_training_fields
from .errors import MalformedResponseError
from .session import Principal, Session
from .softdelete import Collections, SoftDeleteStore
from .transport import Transport


logger = logging.getLogger(__name__)

MAX_VIDEO_BYTES = 50 * 1024 * 1024
MAX_IMAGE_BYTES = 10 * 1024 * 1024
IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}

# lifecycle operation -> endpoint
ENDPOINTS = {
    "update": "/training/update",
    "remove": "/training/delete",
    "restore": "/training/restore",
    "purge": "/training/permanent-delete",
}


@dataclass(frozen=True)
class TrainingDocument:
    id: str
    title: str
    created_by: str
    description: str = ""
    thumbnail_url: str = ""
    blocks: tuple = ()
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    deleted_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "TrainingDocument":
        if not isinstance(data, dict) or "id" not in data:
            raise MalformedResponseError("Server returned an invalid response. Please try again.")
        blocks = sorted(data.get("blocks") or [], key=lambda b: b.get("order", 0))
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            created_by=data.get("created_by") or "",
            description=data.get("description") or "",
            thumbnail_url=data.get("thumbnail_url") or "",
            blocks=tuple(blocks),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            deleted_at=data.get("deleted_at"),
        )

    def to_payload(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "thumbnail_url": self.thumbnail_url,
            "blocks": [dict(b) for b in self.blocks],
        }

    def is_owned_by(self, email: str) -> bool:
        return self.created_by == email


class TrainingAdapter:
    label = "training"

    def __init__(self, transport: Transport):
        self.transport = transport

    def key(self, doc: TrainingDocument) -> str:
        return doc.id

    def build(self, payload: dict, principal: Principal) -> TrainingDocument:
        return TrainingDocument(
            id="",
            title=validate_training_fields(payload.get("title")),
            created_by=principal.email,
            description=(payload.get("description") or "").strip(),
            thumbnail_url=payload.get("thumbnail_url") or "",
            blocks=tuple(normalize_blocks(payload.get("blocks"))),
        )

    def apply_changes(self, doc: TrainingDocument, changes: dict) -> TrainingDocument:
        updates: dict = {}
        if "title" in changes:
            updates["title"] = validate_training_fields(changes["title"])
        if "description" in changes:
            updates["description"] = (changes["description"] or "").strip()
        if "thumbnail_url" in changes:
            updates["thumbnail_url"] = changes["thumbnail_url"] or ""
        if "blocks" in changes:
            updates["blocks"] = tuple(normalize_blocks(changes["blocks"]))
        return replace(doc, **updates)

    def may_modify(self, doc: TrainingDocument, principal: Principal) -> bool:
        return doc.is_owned_by(principal.email)

    async def load(self, principal: Principal) -> Collections:
        active = await self.transport.get("/trainings")
        deleted = await self.transport.get("/trainings/deleted", {"email": principal.email})
        return Collections(
            tuple(TrainingDocument.from_dict(t) for t in active.get("trainings") or []),
            tuple(TrainingDocument.from_dict(t) for t in deleted.get("trainings") or []),
        )

    async def commit(self, principal: Principal, operation: str, doc: TrainingDocument, after: Collections):
        if operation == "add":
            data = await self.transport.post("/trainings", doc.to_payload(), params={"email": principal.email})
            result = TrainingDocument.from_dict(data.get("training"))
        elif operation == "update":
            body = {"id": doc.id, "email": principal.email, **doc.to_payload()}
            data = await self.transport.post(ENDPOINTS[operation], body)
            result = TrainingDocument.from_dict(data.get("training"))
        else:
            await self.transport.post(ENDPOINTS[operation], {"id": doc.id, "email": principal.email})
            result = doc
        return await self.load(principal), result


class TrainingStore(SoftDeleteStore):
    def __init__(self, transport: Transport, session: Session):
        super().__init__(TrainingAdapter(transport), session)
        self.transport = transport

    def mine(self) -> list[TrainingDocument]:
        principal = self.session.current_user
        if principal is None:
            return []
        return [doc for doc in self.active if doc.is_owned_by(principal.email)]

    async def get(self, training_id: str) -> TrainingDocument:
        if not training_id:
            raise ValidationError("Training ID required", "id")
        data = await self.transport.get("/training", {"id": training_id})
        return TrainingDocument.from_dict(data.get("training"))

    async def upload_video(self, filename: str, content: bytes, content_type: str) -> str:
        if not (content_type or "").startswith("video/"):
            raise ValidationError("Please select a video file", "video")
        if len(content) > MAX_VIDEO_BYTES:
            raise ValidationError("Video file must be less than 50MB", "video")
        data = await self.transport.upload("/upload-video", "video", filename, content, content_type)
        return data["video_url"]

    async def upload_image(self, filename: str, content: bytes, content_type: str) -> str:
        if content_type not in IMAGE_TYPES:
            raise ValidationError("Please select an image file (JPEG, PNG, GIF, or WebP)", "image")
        if len(content) > MAX_IMAGE_BYTES:
            raise ValidationError("Image file must be less than 10MB", "image")
        data = await self.transport.upload("/upload-image", "image", filename, content, content_type)
        return data["image_url"]


@dataclass
class PendingUpload:
    kind: str           # "video" / "image"
    filename: str
    content: bytes
    content_type: str


@dataclass
class TrainingDraft:
    """
    Editor state for a training that has not been saved yet (or is being
    edited). Block order stays dense after every change.
    """
    title: str = ""
    description: str = ""
    thumbnail_url: str = ""
    blocks: list = field(default_factory=list)
    uploads: list = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: TrainingDocument) -> "TrainingDraft":
        return cls(
            title=doc.title,
            description=doc.description,
            thumbnail_url=doc.thumbnail_url,
            blocks=renumber([dict(b) for b in doc.blocks]),
        )

    def add_block(self, block_type: str, content: Optional[dict] = None) -> dict:
        block = make_block(block_type, content, order=len(self.blocks))
        self.blocks = renumber(self.blocks + [block])
        return self.blocks[-1]

    def move_block(self, block_id: str, new_index: int) -> None:
        self.blocks = move_block(self.blocks, block_id, new_index)

    def remove_block(self, block_id: str) -> None:
        self.blocks = remove_block(self.blocks, block_id)

    def attach(self, kind: str, filename: str, content: bytes, content_type: str) -> None:
        """Queue a file; submit() uploads it and appends a block pointing at it."""
        if kind not in ("video", "image"):
            raise ValidationError(f"cannot attach {kind}")
        self.uploads.append(PendingUpload(kind, filename, content, content_type))

    def to_payload(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "thumbnail_url": self.thumbnail_url,
            "blocks": list(self.blocks),
        }

    async def submit(self, store: TrainingStore) -> TrainingDocument:
        """Upload queued files, then create the training."""
        validate_training_fields(self.title)
        # A file leaves the queue once its block exists; a failed submit can be retried.
        while self.uploads:
            upload = self.uploads[0]
            if upload.kind == "video":
                url = await store.upload_video(upload.filename, upload.content, upload.content_type)
                self.add_block("video", {"url": url})
            else:
                url = await store.upload_image(upload.filename, upload.content, upload.content_type)
                self.add_block("image", {"url": url, "alt": upload.filename})
            self.uploads.pop(0)
        doc = await store.add(self.to_payload())
        logger.info("Created training %s with %d blocks", doc.id, len(doc.blocks))
        return doc
