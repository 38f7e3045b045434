# Overview: Client-side path router over the headless browser model.

"""
Router

Maps the window's current path to a render function and keeps the
address bar, history stack and mount point in step:

- set_routes(routes, mount): install the table and the mount point
- resolve(path): exact match, else the longest registered prefix other
  than "/", else the first route
- on_route(): render whatever the location currently says
- navigate(path, force=False): push a history entry and render, unless
  already there (force re-renders in place)
- start()/stop(): attach/detach the link-click interceptor and the
  popstate listener

A render failure never escapes: it is logged, the mount shows an error
panel with the message, and the "route-changed" event still fires.
"""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union
from urllib.parse import urljoin, urlsplit

from .browser import Element, Event, Window
from .errors import RenderError


logger = logging.getLogger(__name__)

RenderFn = Callable[[Element], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class Route:
    path: str
    render: RenderFn


class Router:
    def __init__(self, window: Window):
        self.window = window
        self.routes: list[Route] = []
        self.mount: Optional[Element] = None
        self.last_error: Optional[RenderError] = None
        self.render_count = 0
        self._started = False

    def set_routes(self, routes: list[Route], mount: Element) -> None:
        self.routes = list(routes)
        self.mount = mount

    def resolve(self, path: str) -> Optional[Route]:
        pathname = urlsplit(path).path or "/"
        if not self.routes:
            return None

        for route in self.routes:
            if route.path == pathname:
                return route

        best: Optional[Route] = None
        for route in self.routes:
            if route.path != "/" and pathname.startswith(route.path):
                if best is None or len(route.path) > len(best.path):
                    best = route
        return best or self.routes[0]

    def _rewrite_legacy_hash(self) -> None:
        # "#/inventory" style links from before history routing
        location = self.window.location
        if location.hash.startswith("#/"):
            self.window.history.replace_state(None, location.hash[1:])

    async def on_route(self) -> None:
        self._rewrite_legacy_hash()
        path = self.window.location.pathname
        route = self.resolve(path)

        if self.mount is not None and route is not None:
            self.mount.clear()
            try:
                result = route.render(self.mount)
                if inspect.isawaitable(result):
                    await result
                self.last_error = None
            except Exception as e:
                logger.exception("Render failed for %s", path)
                self.last_error = RenderError(path, e)
                self.mount.clear()
                self.mount.append(
                    Element(
                        "div", {"class": "card error"},
                        Element("h2", {}, "Error"),
                        Element("pre", {}, str(e)),
                    )
                )
            self.render_count += 1

        self.window.dispatch_event(
            Event(
                "route-changed",
                target=self.window,
                detail={"path": path, "route": route.path if route else None},
            )
        )

    async def navigate(self, path: str, force: bool = False) -> None:
        if path == self.window.location.path and not force:
            return
        if path != self.window.location.path:
            self.window.history.push_state(None, path)
        await self.on_route()

    def _on_click(self, event: Event) -> Any:
        target = event.target
        link = target.closest("a") if isinstance(target, Element) else None
        if link is None or not link.get("href"):
            return None
        if link.get("target") == "_blank":
            return None

        href = urljoin(self.window.location.href, link.get("href"))
        parts = urlsplit(href)
        if f"{parts.scheme}://{parts.netloc}" != self.window.origin:
            return None

        event.prevent_default()
        path = parts.path + (f"?{parts.query}" if parts.query else "")
        return self.navigate(path)

    def _on_popstate(self, event: Event) -> Awaitable[None]:
        return self.on_route()

    def start(self) -> None:
        if self._started:
            return
        self.window.document.add_event_listener("click", self._on_click)
        self.window.add_event_listener("popstate", self._on_popstate)
        self._started = True

    def stop(self) -> None:
        self.window.document.remove_event_listener("click", self._on_click)
        self.window.remove_event_listener("popstate", self._on_popstate)
        self._started = False

    async def settle(self) -> None:
        await self.window.settle()
