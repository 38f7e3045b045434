# Overview: Client composition root: builds every client component once and wires the route table.

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .browser import Element, Window
from .config import ClientConfig
from .inventory import InventoryStore
from .router import Route, Router
from .session import FileStorage, MemoryStorage, Session
from .training import TrainingStore
from .transport import Transport
from .views import Toasts, Views


logger = logging.getLogger(__name__)


class TrainHubApp:
    """
    One client instance: a window, the transport, session, both stores,
    the router and the views. Nothing here is a module-level singleton, so
    tests can build as many independent clients as they need.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        storage=None,
        url: Optional[str] = None,
    ):
        self.config = config or ClientConfig()
        self.transport = Transport(self.config.api_base, timeout=self.config.timeout, transport=http_transport)
        if storage is None:
            storage = FileStorage(self.config.state_file) if self.config.state_file else MemoryStorage()
        self.session = Session(self.transport, storage)
        self.inventory = InventoryStore(self.transport, self.session)
        self.trainings = TrainingStore(self.transport, self.session)

        self.window = Window(url or self.config.api_base.rstrip("/") + "/")
        self.mount = Element("main", {"id": "app"})
        self.nav = Element("nav", {"id": "nav"})
        self.toasts = Toasts()
        self.router = Router(self.window)
        self.views = Views(self)
        self.router.set_routes(self.routes(), self.mount)

    def routes(self) -> list[Route]:
        v = self.views
        return [
            Route("/", v.home),
            Route("/login", v.login),
            Route("/signup", v.signup),
            Route("/inventory", v.inventory),
            Route("/recycling-bin", v.recycling_bin),
            Route("/training/create", v.training_create),
            Route("/training/view", v.training_view),
            Route("/training/modules", v.training_modules),
            Route("/training/videos", v.training_videos),
            Route("/training", v.training),
        ]

    async def start(self) -> None:
        """Attach listeners and render the current location."""
        self.window.add_event_listener("route-changed", self.views.render_nav)
        self.router.start()
        await self.router.on_route()
        logger.info("Client started at %s", self.window.location.href)

    async def stop(self) -> None:
        self.router.stop()
        self.window.remove_event_listener("route-changed", self.views.render_nav)
        await self.router.settle()
        await self.transport.aclose()

    async def __aenter__(self) -> "TrainHubApp":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
