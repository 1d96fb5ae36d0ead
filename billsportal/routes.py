from typing import Any, Iterable, Optional

from . import views

ROUTES_PATH = {
    "Login": "/",
    "Bills": "#employee/bills",
    "NewBill": "#employee/bill/new",
}


def render_route(
    pathname: str,
    data: Optional[Iterable[Any]] = None,
    error: Optional[str] = None,
    loading: bool = False,
) -> str:
    if pathname == ROUTES_PATH["Bills"]:
        return views.bills_ui(data=data, error=error, loading=loading)
    if pathname == ROUTES_PATH["NewBill"]:
        return views.new_bill_ui()
    return views.login_ui()
