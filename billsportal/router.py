import inspect
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from . import views
from .containers import BillsContainer
from .models import DisplayBillRecord, SessionUser
from .routes import ROUTES_PATH, render_route

logger = logging.getLogger("billsportal.router")


class Router:
    """Maps a path to its page and keeps the rendered markup in `root`.

    Every navigation gets a token; a bills fetch that settles after a newer
    navigation started is dropped instead of overwriting the newer page.
    """

    def __init__(self, store=None, session: Optional[SessionUser] = None, modal_width: int = 800):
        self.store = store
        self.session = session
        self.modal_width = modal_width
        self.pathname: Optional[str] = None
        self.root = ""
        self.active_icon: Optional[str] = None
        self.error: Optional[Exception] = None
        self.bills: Optional[BillsContainer] = None
        self.data: List[DisplayBillRecord] = []
        self._token = 0
        self._handlers: Dict[Tuple[str, str], Callable[[Mapping[str, str]], Any]] = {}

    async def on_navigate(self, pathname: str) -> str:
        self._token += 1
        token = self._token
        self.pathname = pathname
        self.error = None
        self._handlers = {}

        if pathname == ROUTES_PATH["Bills"]:
            self.active_icon = "icon-window"
            self.root = render_route(pathname, loading=True)
            container = BillsContainer(
                store=self.store,
                on_navigate=self.on_navigate,
                session=self.session,
                modal_width=self.modal_width,
            )
            try:
                data = await container.get_bills()
            except Exception as e:
                if token != self._token:
                    logger.debug("dropping failed fetch of stale navigation %d", token)
                    return self.root
                logger.warning("bills fetch failed: %s", e)
                self.error = e
                self.root = render_route(pathname, error=str(e))
                return self.root
            if token != self._token:
                logger.debug("dropping bills of stale navigation %d", token)
                return self.root
            self.bills = container
            self.data = data
            self.root = render_route(pathname, data=data)
            self._handlers = container.event_handlers()
        elif pathname == ROUTES_PATH["NewBill"]:
            self.active_icon = "icon-mail"
            self.root = render_route(pathname)
        else:
            self.active_icon = None
            self.root = render_route(pathname)
        return self.root

    async def dispatch(self, test_id: str, event: str = "click", element: Optional[Mapping[str, str]] = None):
        handler = self._handlers.get((test_id, event))
        if handler is None:
            raise LookupError(f"no {event} handler bound to {test_id!r} on {self.pathname!r}")
        result = handler(element or {})
        if inspect.isawaitable(result):
            result = await result
        if self.pathname == ROUTES_PATH["Bills"] and self.bills is not None:
            self.root = views.bills_ui(data=self.data, modal=self.bills.modal)
        return result

    async def click(self, test_id: str, element: Optional[Mapping[str, str]] = None):
        return await self.dispatch(test_id, "click", element)
