# billsportal/main.py
import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from .config import get_settings
from .containers import BillsContainer
from .db import init_db
from .models import BillIn, BillUpdate, SessionUser
from .router import Router
from .routes import ROUTES_PATH
from .store import StoreError, get_store
from . import views

settings = get_settings()

# ----------------------------
# App bootstrap (docs toggle)
# ----------------------------
docs_url    = "/docs" if settings.docs_enabled else None
openapi_url = "/openapi.json" if settings.docs_enabled else None

app = FastAPI(
    title="Billed: employee bills",
    version="0.1.0",
    docs_url=docs_url,
    redoc_url=None,
    openapi_url=openapi_url,
)

# CORS
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["*"],
        allow_credentials=True,
    )

# Logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("billsportal")

# ----------------------------
# Lifecycle
# ----------------------------
@app.on_event("startup")
def _startup():
    if settings.store == "sqlite":
        init_db(settings.db_path)
        logger.info("billsportal startup: DB_PATH=%s", settings.db_path)
    else:
        logger.info("billsportal startup: API=%s", settings.api_url)

# ----------------------------
# Dependencies
# ----------------------------
def get_session(request: Request) -> Optional[SessionUser]:
    # the `user` cookie mirrors the portal's session store entry
    return SessionUser.from_json(request.cookies.get("user"))


def get_bill_store(session: Optional[SessionUser] = Depends(get_session)):
    return get_store(settings, session.email if session else None)


def store_http_error(e: StoreError) -> HTTPException:
    return HTTPException(status_code=e.status, detail=str(e))

# ----------------------------
# Public endpoints
# ----------------------------
@app.get("/", summary="Health (root)")
def root_health():
    return {
        "ok": True,
        "service": app.title,
        "store": settings.store,
        "time": datetime.utcnow().isoformat(),
    }

@app.get("/health", summary="Health")
def health():
    # Alias for convenience
    return root_health()

# ----------------------------
# Pages
# ----------------------------
@app.get("/bills", response_class=HTMLResponse, summary="Bills page")
async def bills_page(
    session: Optional[SessionUser] = Depends(get_session),
    store=Depends(get_bill_store),
):
    router = Router(store=store, session=session, modal_width=settings.modal_width)
    markup = await router.on_navigate(ROUTES_PATH["Bills"])
    status = getattr(router.error, "status", 500) if router.error else 200
    return HTMLResponse(views.page("Mes notes de frais", markup), status_code=status)

@app.get("/bills/new", response_class=HTMLResponse, summary="New bill page")
async def new_bill_page(session: Optional[SessionUser] = Depends(get_session)):
    router = Router(session=session, modal_width=settings.modal_width)
    markup = await router.on_navigate(ROUTES_PATH["NewBill"])
    return HTMLResponse(views.page("Nouvelle note de frais", markup))

@app.get("/bills/{bill_id}/receipt", response_class=HTMLResponse, summary="Receipt preview")
async def receipt_preview(
    bill_id: str,
    session: Optional[SessionUser] = Depends(get_session),
    store=Depends(get_bill_store),
):
    container = BillsContainer(store=store, session=session, modal_width=settings.modal_width)
    try:
        bills = await container.get_bills()
    except StoreError as e:
        raise store_http_error(e)
    bill = next((b for b in bills if str(b.id) == bill_id), None)
    if bill is None:
        raise HTTPException(404, "Bill not found")
    modal = container.handle_click_icon_eye({"data-bill-url": bill.fileUrl or ""})
    return HTMLResponse(views.receipt_modal(modal))

# ----------------------------
# JSON API
# ----------------------------
@app.get("/api/bills", summary="List bills, newest first")
async def list_bills(
    session: Optional[SessionUser] = Depends(get_session),
    store=Depends(get_bill_store),
):
    container = BillsContainer(store=store, session=session)
    try:
        bills = await container.get_bills()
    except StoreError as e:
        raise store_http_error(e)
    return {"items": [dict(b) for b in bills]}

@app.post("/api/bills", summary="Create a bill")
async def create_bill(bill_in: BillIn, store=Depends(get_bill_store)):
    try:
        return await store.bills().create(bill_in.model_dump())
    except StoreError as e:
        raise store_http_error(e)

@app.patch("/api/bills/{bill_id}", summary="Update a bill")
async def update_bill(bill_id: str, changes: BillUpdate, store=Depends(get_bill_store)):
    try:
        return await store.bills().update(bill_id, changes.model_dump(exclude_unset=True))
    except StoreError as e:
        raise store_http_error(e)
