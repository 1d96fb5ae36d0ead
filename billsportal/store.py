"""
Bill stores.

Every backend exposes the same shape: ``store.bills()`` returns a resource
with awaitable ``list()``, ``create(payload)`` and ``update(selector, payload)``.
Failures are raised as StoreError; its message is what the user gets to see.
"""
import logging
import sqlite3
from typing import Any, Dict, List, Optional

import requests
from fastapi.concurrency import run_in_threadpool

from . import db
from .config import Settings
from .models import Bill, BillIn

logger = logging.getLogger("billsportal.store")


class StoreError(Exception):
    def __init__(self, message: str, status: int = 500):
        super().__init__(message)
        self.status = status


# ----------------------------
# Local SQLite store
# ----------------------------
class SqliteBills:
    def __init__(self, db_path: str, email: Optional[str] = None):
        self.db_path = db_path
        self.email = email

    async def list(self) -> List[Dict[str, Any]]:
        try:
            return await run_in_threadpool(db.list_bills, self.email, self.db_path)
        except sqlite3.Error as e:
            logger.exception("list bills failed")
            raise StoreError("Erreur 500", 500) from e

    async def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        bill = Bill(**BillIn(**payload).model_dump())
        try:
            await run_in_threadpool(db.insert_bill, bill.model_dump(), self.db_path)
        except sqlite3.Error as e:
            logger.exception("create bill failed")
            raise StoreError("Erreur 500", 500) from e
        return bill.model_dump()

    async def update(self, selector: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            ok = await run_in_threadpool(db.update_bill, selector, payload, self.db_path)
            row = await run_in_threadpool(db.get_bill, selector, self.db_path) if ok else None
        except sqlite3.Error as e:
            logger.exception("update bill %s failed", selector)
            raise StoreError("Erreur 500", 500) from e
        if row is None:
            raise StoreError("Erreur 404", 404)
        return row


class SqliteStore:
    def __init__(self, db_path: str, email: Optional[str] = None):
        self.db_path = db_path
        self.email = email

    def bills(self) -> SqliteBills:
        return SqliteBills(self.db_path, self.email)


# ----------------------------
# Remote portal API
# ----------------------------
class ApiBills:
    def __init__(self, api: "ApiStore"):
        self.api = api

    async def list(self) -> List[Dict[str, Any]]:
        return await run_in_threadpool(self.api.request, "GET", "/bills")

    async def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await run_in_threadpool(self.api.request, "POST", "/bills", payload)

    async def update(self, selector: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await run_in_threadpool(self.api.request, "PATCH", f"/bills/{selector}", payload)


class ApiStore:
    def __init__(self, base_url: str, token: str = "", timeout: float = 10.0, session=None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.http = session or requests.Session()

    def bills(self) -> ApiBills:
        return ApiBills(self)

    def request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None):
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            resp = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise StoreError(str(e), 503) from e
        if not resp.ok:
            logger.warning("%s %s -> %s", method, path, resp.status_code)
            raise StoreError(f"Erreur {resp.status_code}", resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            logger.warning("%s %s -> %s with a non-JSON body", method, path, resp.status_code)
            raise StoreError("Erreur 502", 502) from e


def get_store(settings: Settings, email: Optional[str] = None):
    if settings.store == "api":
        return ApiStore(settings.api_url, settings.api_token, settings.api_timeout)
    if settings.store == "sqlite":
        return SqliteStore(settings.db_path, email)
    raise ValueError(f"Unknown BILLS_STORE: {settings.store!r}")
