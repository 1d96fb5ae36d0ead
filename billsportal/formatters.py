import logging
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Iterable, List, Optional, TypeVar

logger = logging.getLogger("billsportal.formatters")

T = TypeVar("T")
R = TypeVar("R")

# French short month names, as the portal displays them
MONTHS = ["Jan", "Fév", "Mar", "Avr", "Mai", "Jui", "Jui", "Aoû", "Sep", "Oct", "Nov", "Déc"]

STATUS_LABELS = {
    "pending": "En attente",
    "accepted": "Accepté",
    "refused": "Refusé",
}


class DateFormatError(ValueError):
    pass


def parse_date(raw: Any) -> Optional[date]:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return None
    value = raw.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def parse_timestamp(raw: Any) -> Optional[datetime]:
    """Aware datetime for ordering bills. Naive values and plain dates are UTC."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, date):
        value = datetime.combine(raw, time.min)
    elif isinstance(raw, str) and raw.strip():
        text = raw.strip()
        try:
            value = datetime.combine(date.fromisoformat(text), time.min)
        except ValueError:
            try:
                value = datetime.fromisoformat(text.replace("Z", "+00:00"))
            except ValueError:
                return None
    else:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def format_date(raw: Any) -> str:
    """Format an ISO date as `<day> <Mon>. <yy>`, e.g. `4 Avr. 04`.

    Raises DateFormatError when `raw` is not a date.
    """
    d = parse_date(raw)
    if d is None:
        raise DateFormatError(f"Invalid date: {raw!r}")
    return f"{d.day} {MONTHS[d.month - 1]}. {d.year % 100:02d}"


def format_status(code: Any) -> str:
    # unknown codes are echoed back unchanged
    if code is None:
        return ""
    return STATUS_LABELS.get(code, str(code)) if isinstance(code, str) else str(code)


def best_effort_map(
    fn: Callable[[T], R],
    items: Iterable[T],
    fallback: Callable[[T, Exception], R],
) -> List[R]:
    """Apply `fn` to every item, using `fallback(item, exc)` for the ones that fail.

    A failing item never aborts the rest of the sequence.
    """
    out: List[R] = []
    for item in items:
        try:
            out.append(fn(item))
        except Exception as e:
            logger.debug("best_effort_map: fallback for %r (%s)", item, e)
            out.append(fallback(item, e))
    return out
