"""
Headless browser model.

Just enough of a page for the client to run without a real browser:
a Window with a Location and a History stack, a tiny element tree for
views to render into, and DOM-style events ("click" on the document,
"popstate" and "route-changed" on the window).

Listeners may be plain callables or coroutine functions. Coroutines are
scheduled on the running loop and tracked so callers can `await
window.settle()` until every pending handler has finished.
"""
from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Optional
from urllib.parse import parse_qs, urljoin, urlsplit


class Event:
    def __init__(self, type: str, *, target: Any = None, detail: Any = None):
        self.type = type
        self.target = target
        self.detail = detail
        self.default_prevented = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class EventTarget:
    def __init__(self):
        self._listeners: dict[str, list[Callable]] = {}
        self._tasks: set[asyncio.Task] = set()

    def add_event_listener(self, type: str, listener: Callable) -> None:
        listeners = self._listeners.setdefault(type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, type: str, listener: Callable) -> None:
        listeners = self._listeners.get(type, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, type: str) -> int:
        return len(self._listeners.get(type, []))

    def spawn(self, result: Any) -> None:
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    def dispatch_event(self, event: Event) -> bool:
        """Run listeners in registration order. Returns False if default was prevented."""
        for listener in list(self._listeners.get(event.type, [])):
            self.spawn(listener(event))
        return not event.default_prevented

    async def settle(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks))


class Element:
    """
    Minimal element node. Children are Elements or strings.

    `on_click` is the element's own action; it runs after document click
    listeners unless one of them prevented the default.
    """

    def __init__(self, tag: str, attrs: Optional[dict] = None, *children, on_click: Optional[Callable] = None):
        self.tag = tag
        self.attrs = dict(attrs or {})
        self.children: list = []
        self.parent: Optional[Element] = None
        self.on_click = on_click
        self.value: str = self.attrs.pop("value", "")
        for child in children:
            self.append(child)

    def append(self, child) -> "Element":
        if child is None:
            return self
        if isinstance(child, Element):
            child.parent = self
        self.children.append(child)
        return self

    def clear(self) -> None:
        for child in self.children:
            if isinstance(child, Element):
                child.parent = None
        self.children = []

    def get(self, name: str, default: Any = None) -> Any:
        return self.attrs.get(name, default)

    @property
    def classes(self) -> list[str]:
        return (self.attrs.get("class") or "").split()

    @property
    def text(self) -> str:
        parts = []
        for child in self.children:
            parts.append(child.text if isinstance(child, Element) else str(child))
        return " ".join(p for p in parts if p)

    def closest(self, tag: str) -> Optional["Element"]:
        node: Optional[Element] = self
        while node is not None:
            if node.tag == tag:
                return node
            node = node.parent
        return None

    def _matches(self, selector: str) -> bool:
        if selector.startswith("#"):
            return self.attrs.get("id") == selector[1:]
        if selector.startswith("."):
            return selector[1:] in self.classes
        if "[" in selector:
            tag, _, rest = selector.partition("[")
            name, _, wanted = rest.rstrip("]").partition("=")
            if tag and self.tag != tag:
                return False
            return str(self.attrs.get(name)) == wanted.strip("'\"")
        return self.tag == selector

    def walk(self):
        for child in self.children:
            if isinstance(child, Element):
                yield child
                yield from child.walk()

    def query_all(self, selector: str) -> list["Element"]:
        return [el for el in self.walk() if el._matches(selector)]

    def query(self, selector: str) -> Optional["Element"]:
        return next((el for el in self.walk() if el._matches(selector)), None)

    def __repr__(self) -> str:
        return f"<{self.tag} {self.attrs!r}>"


def anchor(href: str, *children, target: Optional[str] = None, **attrs) -> Element:
    attrs["href"] = href
    if target:
        attrs["target"] = target
    return Element("a", attrs, *children)


class Location:
    def __init__(self, url: str):
        self._set(url)

    def _set(self, url: str) -> None:
        parts = urlsplit(url)
        self.origin = f"{parts.scheme}://{parts.netloc}"
        self.pathname = parts.path or "/"
        self.search = f"?{parts.query}" if parts.query else ""
        self.hash = f"#{parts.fragment}" if parts.fragment else ""

    @property
    def path(self) -> str:
        """pathname + search, the part the router compares on."""
        return self.pathname + self.search

    @property
    def href(self) -> str:
        return self.origin + self.pathname + self.search + self.hash

    def param(self, name: str) -> Optional[str]:
        values = parse_qs(self.search.lstrip("?")).get(name)
        return values[0] if values else None


class History:
    """Session history stack. back()/forward() fire "popstate" on the window."""

    def __init__(self, window: "Window"):
        self._window = window
        self.entries: list[tuple[Any, str]] = [(None, window.location.href)]
        self.index = 0

    @property
    def length(self) -> int:
        return len(self.entries)

    @property
    def state(self) -> Any:
        return self.entries[self.index][0]

    def push_state(self, state: Any, url: str) -> None:
        href = urljoin(self._window.location.href, url)
        del self.entries[self.index + 1:]
        self.entries.append((state, href))
        self.index += 1
        self._window.location._set(href)

    def replace_state(self, state: Any, url: str) -> None:
        href = urljoin(self._window.location.href, url)
        self.entries[self.index] = (state, href)
        self._window.location._set(href)

    def go(self, delta: int) -> None:
        target = self.index + delta
        if delta == 0 or not 0 <= target < len(self.entries):
            return
        self.index = target
        state, href = self.entries[target]
        self._window.location._set(href)
        self._window.dispatch_event(Event("popstate", target=self._window, detail=state))

    def back(self) -> None:
        self.go(-1)

    def forward(self) -> None:
        self.go(1)


class Window(EventTarget):
    """
    A page. `page_loads` records every full document load (the initial
    open and any link click that nothing intercepted).
    """

    def __init__(self, url: str = "http://localhost:3000/"):
        super().__init__()
        self.location = Location(url)
        self.history = History(self)
        self.document = EventTarget()
        self.page_loads: list[str] = [self.location.href]
        self.opened: list[str] = []

    @property
    def origin(self) -> str:
        return self.location.origin

    def assign(self, url: str) -> None:
        href = urljoin(self.location.href, url)
        self.location._set(href)
        self.history = History(self)
        self.page_loads.append(href)

    def click(self, element: Element) -> bool:
        """
        Simulate a user click. Document listeners see the event first; the
        element's default action runs only if none of them prevented it.
        Returns True when the default action ran.
        """
        event = Event("click", target=element)
        if not self.document.dispatch_event(event):
            return False

        if element.on_click is not None:
            self.spawn(element.on_click(event))
            return True

        link = element.closest("a")
        if link is not None and link.get("href"):
            if link.get("target") == "_blank":
                self.opened.append(urljoin(self.location.href, link.get("href")))
            else:
                self.assign(link.get("href"))
        return True

    async def settle(self) -> None:
        while self._tasks or self.document._tasks:
            await asyncio.gather(*list(self._tasks), *list(self.document._tasks))
