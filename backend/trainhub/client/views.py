# Overview: Render functions for every route plus the nav bar and toasts.

"""
Views render into the mount point handed over by the Router. They hold no
entity state of their own: lists come from the stores (refreshed on every
render), and the only local state is the training draft being edited.

User-facing failures are shown as toasts via user_message(); an exception
that escapes a render function is turned into an error panel by the Router.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..validation import ValidationError
from .browser import Element, Event, anchor
from .errors import ClientError, user_message
from .training import TrainingDraft, TrainingDocument

if TYPE_CHECKING:
    from .app import TrainHubApp


logger = logging.getLogger(__name__)

MESSAGES = {
    "signup": "Account created successfully!",
    "login": "Signed in successfully",
    "logout": "Signed out successfully",
    "item_added": "Item added successfully",
    "item_removed": "Item moved to recycling bin",
    "item_restored": "Item restored",
    "item_purged": "Item permanently deleted",
    "training_created": "Training created",
    "training_removed": "Training moved to recycling bin",
    "training_restored": "Training restored",
    "training_purged": "Training permanently deleted",
}

MODULES = [
    ("Module 1: Fundamentals", "Learn the basics and core concepts", "30 min"),
    ("Module 2: Intermediate Skills", "Build on your foundation with advanced techniques", "45 min"),
    ("Module 3: Advanced Techniques", "Master complex scenarios and expert-level practices", "60 min"),
]

VIDEOS = [
    ("How to use Train Hub", "Get started with Train Hub and learn the basics", "15 min"),
    ("Effective Training Techniques", "Master proven methods for effective training", "25 min"),
    ("Safety and Best Practices", "Learn essential safety protocols and industry best practices", "20 min"),
]


@dataclass
class Toast:
    message: str
    kind: str = "error"


class Toasts:
    """Transient notifications; the newest is last."""

    def __init__(self):
        self.items: list[Toast] = []

    def show(self, message: str, kind: str = "error") -> None:
        logger.debug("toast %s: %s", kind, message)
        self.items.append(Toast(message, kind))

    def success(self, message: str) -> None:
        self.show(message, "success")

    def error(self, message: str) -> None:
        self.show(message, "error")

    @property
    def latest(self) -> Optional[Toast]:
        return self.items[-1] if self.items else None

    def clear(self) -> None:
        self.items = []


def el(tag: str, attrs: Optional[dict] = None, *children, on_click=None) -> Element:
    return Element(tag, attrs, *children, on_click=on_click)


def need_indicator(item) -> Element:
    if item.need > 0:
        return el("span", {"class": "need"}, f"Need: +{item.need}")
    return el("span", {"class": "stocked"}, "Stocked")


def render_block(block: dict) -> Element:
    content = block.get("content") or {}
    kind = block.get("type")
    if kind == "title":
        return el("h2", {"class": "block-title"}, content.get("text", ""))
    if kind == "text":
        return el("p", {"class": "block-text"}, content.get("text", ""))
    if kind == "video":
        return el("video", {"src": content.get("url", ""), "controls": "controls"})
    if kind == "image":
        return el("img", {"src": content.get("url", ""), "alt": content.get("alt", "")})
    if kind == "code":
        return el("pre", {"class": "block-code", "data-language": content.get("language", "")},
                  el("code", {}, content.get("code", "")))
    if kind == "list":
        tag = "ol" if content.get("ordered") else "ul"
        return el(tag, {"class": "block-list"}, *[el("li", {}, item) for item in content.get("items", [])])
    if kind == "quote":
        return el("blockquote", {},
                  content.get("text", ""),
                  el("cite", {}, content["author"]) if content.get("author") else None)
    if kind == "divider":
        return el("hr")
    return el("div", {"class": "muted"}, f"Unsupported block: {kind}")


class Views:
    def __init__(self, app: "TrainHubApp"):
        self.app = app
        self.draft = TrainingDraft()

    # -- helpers -----------------------------------------------------------

    @property
    def router(self):
        return self.app.router

    @property
    def toasts(self) -> Toasts:
        return self.app.toasts

    def _value(self, selector: str) -> str:
        node = self.router.mount.query(selector) if self.router.mount else None
        return node.value if node is not None else ""

    def _signed_in(self):
        """Current principal, or schedule a redirect to /login and return None."""
        user = self.app.session.current_user
        if user is None:
            self.app.window.spawn(self.router.navigate("/login"))
        return user

    async def _rerender(self) -> None:
        await self.router.navigate(self.app.window.location.path, force=True)

    async def _run(self, action, success: str) -> bool:
        try:
            await action
        except (ClientError, ValidationError) as e:
            self.toasts.error(user_message(e))
            return False
        self.toasts.success(success)
        return True

    # -- nav ---------------------------------------------------------------

    def render_nav(self, event: Optional[Event] = None) -> None:
        nav = self.app.nav
        nav.clear()
        nav.append(anchor("/", "Home"))
        user = self.app.session.current_user
        if user:
            nav.append(anchor("/inventory", "Inventory"))
            nav.append(anchor("/training", "Training"))
            nav.append(anchor("/recycling-bin", "Recycling Bin"))
            nav.append(el("span", {"class": "muted"}, user.name or user.email))
            nav.append(el("button", {"id": "sign-out", "class": "primary"}, "Sign out", on_click=self._logout))
        else:
            nav.append(anchor("/login", "Sign in", **{"class": "btn primary"}))
            nav.append(anchor("/signup", "Sign up", **{"class": "btn"}))

    async def _logout(self, event: Event) -> None:
        self.app.session.logout()
        self.toasts.success(MESSAGES["logout"])
        await self.router.navigate("/", force=True)

    # -- public pages ------------------------------------------------------

    async def home(self, mount: Element) -> None:
        user = self.app.session.current_user
        if user is None:
            mount.append(el("div", {"class": "hero-section"},
                el("h1", {"class": "hero-title"}, "Welcome to Train Hub"),
                el("p", {"class": "hero-subtitle"},
                   "Your comprehensive platform for inventory management and professional training."),
            ))
            mount.append(el("div", {"class": "card cta-card"},
                el("h2", {}, "Get Started Today"),
                anchor("/signup", "Create Account", **{"class": "btn btn-large primary"}),
                anchor("/login", "Sign In", **{"class": "btn btn-large"}),
            ))
            return
        await self.training(mount)

    def login(self, mount: Element) -> None:
        mount.append(el("div", {"class": "card login-card"},
            el("h2", {}, "Welcome Back"),
            el("input", {"id": "login-email", "type": "email", "placeholder": "you@example.com"}),
            el("input", {"id": "login-password", "type": "password"}),
            el("button", {"id": "login-submit", "class": "btn btn-large primary"}, "Sign In", on_click=self._login),
            anchor("/signup", "Sign up here", **{"class": "link"}),
        ))

    async def _login(self, event: Event) -> None:
        email = self._value("#login-email").strip()
        password = self._value("#login-password")
        if not email:
            self.toasts.error("Please enter your email")
            return
        if not password:
            self.toasts.error("Please enter your password")
            return
        if await self._run(self.app.session.login(email, password), MESSAGES["login"]):
            await self.router.navigate("/")

    def signup(self, mount: Element) -> None:
        mount.append(el("div", {"class": "card signup-card"},
            el("h2", {}, "Create Your Account"),
            el("input", {"id": "signup-name", "type": "text", "placeholder": "John Doe"}),
            el("input", {"id": "signup-email", "type": "email", "placeholder": "you@example.com"}),
            el("input", {"id": "signup-password", "type": "password", "placeholder": "Minimum 6 characters"}),
            el("input", {"id": "signup-confirm", "type": "password"}),
            el("button", {"id": "signup-submit", "class": "btn btn-large primary"}, "Create Account",
               on_click=self._signup),
            anchor("/login", "Sign in here", **{"class": "link"}),
        ))

    async def _signup(self, event: Event) -> None:
        action = self.app.session.signup(
            self._value("#signup-name"),
            self._value("#signup-email"),
            self._value("#signup-password"),
            self._value("#signup-confirm"),
        )
        if await self._run(action, MESSAGES["signup"]):
            await self.router.navigate("/")

    # -- inventory ---------------------------------------------------------

    async def inventory(self, mount: Element) -> None:
        if self._signed_in() is None:
            return
        store = self.app.inventory
        await store.refresh()

        mount.append(el("div", {"class": "inventory-header"},
            el("h1", {}, "Inventory"),
            el("p", {"class": "muted", "id": "inventory-count"}, f"{len(store.active)} items"),
        ))
        mount.append(el("div", {"class": "card add-item"},
            el("input", {"id": "item-description", "placeholder": "Description"}),
            el("input", {"id": "item-upc", "placeholder": "UPC"}),
            el("input", {"id": "item-number", "placeholder": "Item #"}),
            el("input", {"id": "item-quantity", "type": "number", "value": "0"}),
            el("input", {"id": "item-target", "type": "number", "value": "0"}),
            el("button", {"id": "lookup-barcode", "class": "btn"}, "Look up UPC", on_click=self._lookup_barcode),
            el("button", {"id": "add-item", "class": "btn primary"}, "Add Item", on_click=self._add_item),
        ))

        if not store.active:
            mount.append(el("p", {"class": "muted empty"}, "No items yet."))
            return

        listing = el("ul", {"id": "inventory-list"})
        for item in store.active:
            listing.append(el("li", {"class": "inventory-item", "data-id": item.id},
                el("span", {"class": "description"}, item.description),
                el("span", {"class": "upc"}, f"UPC: {item.upc}") if item.upc else None,
                el("span", {"class": "number"}, f"#{item.number}") if item.number else None,
                el("span", {"class": "quantity"}, f"{item.quantity} / {item.target_quantity}"),
                need_indicator(item),
                el("button", {"class": "remove-item", "data-id": item.id}, "Remove",
                   on_click=lambda e, ref=item.id: self._remove_item(ref)),
            ))
        mount.append(listing)

    async def _add_item(self, event: Event) -> None:
        payload = {
            "description": self._value("#item-description"),
            "upc": self._value("#item-upc"),
            "number": self._value("#item-number"),
            "quantity": self._value("#item-quantity") or "0",
            "target_quantity": self._value("#item-target") or "0",
        }
        if await self._run(self.app.inventory.add(payload), MESSAGES["item_added"]):
            await self._rerender()

    async def _lookup_barcode(self, event: Event) -> None:
        try:
            product = await self.app.inventory.lookup_barcode(self._value("#item-upc"))
        except (ClientError, ValidationError) as e:
            self.toasts.error(user_message(e))
            return
        field = self.router.mount.query("#item-description")
        if field is not None and product.get("description"):
            field.value = product["description"]
        self.toasts.success("Product found")

    async def _remove_item(self, ref: str) -> None:
        if await self._run(self.app.inventory.remove(ref), MESSAGES["item_removed"]):
            await self._rerender()

    # -- recycling bin -----------------------------------------------------

    async def recycling_bin(self, mount: Element) -> None:
        if self._signed_in() is None:
            return
        inventory, trainings = self.app.inventory, self.app.trainings
        await inventory.refresh()
        await trainings.refresh()

        mount.append(el("h1", {}, "Recycling Bin"))
        if not inventory.deleted and not trainings.deleted:
            mount.append(el("p", {"class": "muted empty"}, "Recycling bin is empty."))
            return

        items = el("ul", {"id": "deleted-items"})
        for item in inventory.deleted:
            items.append(el("li", {"class": "deleted-item", "data-id": item.id},
                el("span", {"class": "description"}, item.description),
                el("button", {"class": "restore-item", "data-id": item.id}, "Restore",
                   on_click=lambda e, ref=item.id: self._bin_action(inventory.restore(ref), "item_restored")),
                el("button", {"class": "purge-item", "data-id": item.id}, "Delete forever",
                   on_click=lambda e, ref=item.id: self._bin_action(inventory.purge(ref), "item_purged")),
            ))
        mount.append(el("section", {}, el("h2", {}, "Inventory"), items))

        docs = el("ul", {"id": "deleted-trainings"})
        for doc in trainings.deleted:
            docs.append(el("li", {"class": "deleted-training", "data-id": doc.id},
                el("span", {"class": "title"}, doc.title),
                el("button", {"class": "restore-training", "data-id": doc.id}, "Restore",
                   on_click=lambda e, ref=doc.id: self._bin_action(trainings.restore(ref), "training_restored")),
                el("button", {"class": "purge-training", "data-id": doc.id}, "Delete forever",
                   on_click=lambda e, ref=doc.id: self._bin_action(trainings.purge(ref), "training_purged")),
            ))
        mount.append(el("section", {}, el("h2", {}, "Trainings"), docs))

    async def _bin_action(self, action, message_key: str) -> None:
        if await self._run(action, MESSAGES[message_key]):
            await self._rerender()

    # -- training ----------------------------------------------------------

    def _training_card(self, doc: TrainingDocument, email: str) -> Element:
        card = el("li", {"class": "card training-card", "data-id": doc.id},
            anchor(f"/training/view?id={doc.id}", doc.title, **{"class": "training-link"}),
            el("p", {"class": "muted"}, doc.description) if doc.description else None,
            el("span", {"class": "meta"}, f"{len(doc.blocks)} blocks by {doc.created_by}"),
        )
        if doc.is_owned_by(email):
            card.append(el("button", {"class": "delete-training", "data-id": doc.id}, "Delete",
                           on_click=lambda e, ref=doc.id: self._remove_training(ref)))
        return card

    async def training(self, mount: Element) -> None:
        user = self._signed_in()
        if user is None:
            return
        store = self.app.trainings
        await store.refresh()

        mount.append(el("div", {"class": "training-header"},
            el("h1", {}, "Training Center"),
            el("p", {"class": "muted"}, "Create and access interactive training modules and video resources"),
            anchor("/training/create", "Create Training", **{"class": "btn primary"}),
            anchor("/training/modules", "Modules", **{"class": "btn"}),
            anchor("/training/videos", "Videos", **{"class": "btn"}),
        ))
        if not store.active:
            mount.append(el("p", {"class": "muted empty"}, "No trainings yet."))
            return
        mount.append(el("ul", {"id": "training-list"},
                        *[self._training_card(doc, user.email) for doc in store.active]))

    async def _remove_training(self, ref: str) -> None:
        if await self._run(self.app.trainings.remove(ref), MESSAGES["training_removed"]):
            await self._rerender()

    def training_create(self, mount: Element) -> None:
        if self._signed_in() is None:
            return
        draft = self.draft
        blocks = el("ol", {"id": "draft-blocks"})
        for block in draft.blocks:
            blocks.append(el("li", {"class": "draft-block", "data-id": block["id"]},
                             f"{block['order'] + 1}. {block['type']}"))

        mount.append(el("div", {"class": "card training-editor"},
            el("h1", {}, "Create Training"),
            el("input", {"id": "training-title", "placeholder": "Title", "value": draft.title}),
            el("input", {"id": "training-description", "placeholder": "Description", "value": draft.description}),
            blocks,
            el("p", {"class": "muted"}, f"{len(draft.uploads)} file(s) waiting to upload") if draft.uploads else None,
            el("input", {"id": "block-text", "placeholder": "Paragraph text"}),
            el("button", {"id": "add-text-block", "class": "btn"}, "Add Text", on_click=self._add_text_block),
            el("button", {"id": "create-training", "class": "btn primary"}, "Create Training",
               on_click=self._create_training),
        ))

    def _capture_draft_fields(self) -> None:
        self.draft.title = self._value("#training-title")
        self.draft.description = self._value("#training-description")

    async def _add_text_block(self, event: Event) -> None:
        self._capture_draft_fields()
        text = self._value("#block-text").strip()
        if not text:
            self.toasts.error("Please enter some text")
            return
        self.draft.add_block("text", {"text": text})
        await self._rerender()

    async def _create_training(self, event: Event) -> None:
        self._capture_draft_fields()
        try:
            doc = await self.draft.submit(self.app.trainings)
        except (ClientError, ValidationError) as e:
            self.toasts.error(user_message(e))
            return
        self.toasts.success(MESSAGES["training_created"])
        self.draft = TrainingDraft()
        await self.router.navigate(f"/training/view?id={doc.id}")

    async def training_view(self, mount: Element) -> None:
        if self._signed_in() is None:
            return
        training_id = self.app.window.location.param("id")
        if not training_id:
            mount.append(el("div", {"class": "card"}, el("h2", {}, "Training not found")))
            return

        doc = await self.app.trainings.get(training_id)
        mount.append(el("div", {"class": "training-view-header"},
            el("h1", {}, doc.title),
            el("p", {"class": "muted"}, doc.description) if doc.description else None,
            anchor("/training", "Back to trainings", **{"class": "link"}),
        ))
        content = el("div", {"class": "training-content"}, *[render_block(b) for b in doc.blocks])
        if not doc.blocks:
            content.append(el("p", {"class": "muted"}, "No content available for this training"))
        mount.append(content)

    def training_modules(self, mount: Element) -> None:
        if self._signed_in() is None:
            return
        mount.append(el("h1", {}, "Training Modules"))
        mount.append(el("div", {"class": "modules-list"}, *[
            el("div", {"class": "card module-card"},
               el("h3", {}, title), el("p", {"class": "muted"}, desc), el("span", {}, duration),
               el("button", {"class": "btn primary"}, "Start Module",
                  on_click=lambda e, t=title: self.toasts.success(f"Starting {t}...")))
            for title, desc, duration in MODULES
        ]))

    def training_videos(self, mount: Element) -> None:
        if self._signed_in() is None:
            return
        mount.append(el("h1", {}, "Video Resources"))
        mount.append(el("div", {"class": "videos-grid"}, *[
            el("div", {"class": "card video-card"},
               el("h3", {}, title), el("p", {"class": "muted"}, desc), el("span", {}, duration),
               el("button", {"class": "btn primary"}, "Watch Video",
                  on_click=lambda e, t=title: self.toasts.success(f"Playing: {t}")))
            for title, desc, duration in VIDEOS
        ]))
