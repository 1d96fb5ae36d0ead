import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlparse

from .formatters import best_effort_map, format_date, format_status, parse_timestamp
from .models import BillRecord, DisplayBillRecord, ReceiptModal, SessionUser
from .routes import ROUTES_PATH

logger = logging.getLogger("billsportal.bills")

BILL_URL_ATTR = "data-bill-url"


def _to_record(item: Any) -> BillRecord:
    if isinstance(item, BillRecord):
        return item
    return BillRecord.model_validate(item)


def _raw_record(item: Any, error: Exception) -> BillRecord:
    # keep the record in the list even when it does not validate
    if isinstance(item, Mapping):
        return BillRecord.model_construct(**{str(k): v for k, v in item.items()})
    return BillRecord.model_construct(id=None, raw=item)


EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def _sort_key(record: BillRecord) -> Tuple[bool, datetime]:
    ts = parse_timestamp(record.date)
    # undated records compare lower, so they land after every dated one
    return (ts is not None, ts or EARLIEST)


def _receipt_url(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    url = value.strip()
    if url in ("", "null", "undefined"):
        return ""
    parsed = urlparse(url)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return url
    # relative paths are resolved by the browser against the page
    if not parsed.scheme:
        return url
    return ""


class BillsContainer:
    """Employee bills page: loads, orders and formats bills, handles page clicks."""

    def __init__(
        self,
        store=None,
        on_navigate: Optional[Callable[[str], Any]] = None,
        session: Optional[SessionUser] = None,
        modal_width: int = 800,
    ):
        self.store = store
        self.on_navigate = on_navigate
        self.session = session
        self.modal_width = modal_width
        self.modal = ReceiptModal()

    def event_handlers(self) -> Dict[Tuple[str, str], Callable[[Mapping[str, str]], Any]]:
        """Handlers keyed by (data-testid, event) for the rendering layer to bind."""
        return {
            ("btn-new-bill", "click"): lambda element: self.handle_click_new_bill(),
            ("icon-eye", "click"): self.handle_click_icon_eye,
        }

    def handle_click_new_bill(self):
        if self.on_navigate is None:
            logger.warning("new bill clicked without a navigation callback")
            return None
        return self.on_navigate(ROUTES_PATH["NewBill"])

    def handle_click_icon_eye(self, icon: Mapping[str, str]) -> ReceiptModal:
        raw = icon.get(BILL_URL_ATTR) if icon is not None else None
        url = _receipt_url(raw)
        if not url:
            logger.info("receipt preview without a usable file url: %r", raw)
        self.modal = ReceiptModal(visible=True, image_url=url, width=int(self.modal_width * 0.5))
        return self.modal

    def close_modal(self) -> ReceiptModal:
        self.modal = ReceiptModal()
        return self.modal

    async def get_bills(self) -> List[DisplayBillRecord]:
        if self.store is None:
            logger.debug("no store configured, nothing to list")
            return []

        raw = await self.store.bills().list()

        records = best_effort_map(_to_record, raw, _raw_record)
        ordered = sorted(records, key=_sort_key, reverse=True)
        dates = best_effort_map(lambda r: format_date(r.date), ordered, lambda r, e: r.date)

        bills = [
            DisplayBillRecord.model_construct(**{**dict(r), "date": d, "status": format_status(r.status)})
            for r, d in zip(ordered, dates)
        ]
        logger.debug("listed %d bills for %s", len(bills), self.session.email if self.session else "-")
        return bills
