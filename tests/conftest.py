"""
Shared fixtures for the bills tests.

Run with:
    pytest -v
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from billsportal.store import StoreError

FILE_URL = "https://test.storage.tld/v0/b/billable-677b6.a%E2%80%A6f-1.jpg?alt=media&token=c1640e12-a24b-4b11-ae52-529112e9602a"


@pytest.fixture
def bills():
    """Four bills for employee a@a, stored oldest-last out of order."""
    return [
        {
            "id": "47qAXb6fIm2zOKkLzMro",
            "vat": "80",
            "fileUrl": FILE_URL,
            "status": "pending",
            "type": "Hôtel et logement",
            "commentary": "séminaire billed",
            "name": "encore",
            "fileName": "preview-facture-free-201801-pdf-1.jpg",
            "date": "2004-04-04",
            "amount": 400,
            "commentAdmin": "ok",
            "email": "a@a",
            "pct": 20,
        },
        {
            "id": "BeKy5Mo4jkmdfPGYpTxZ",
            "vat": "",
            "amount": 100,
            "name": "test1",
            "fileName": "1592770761.jpeg",
            "commentary": "plop",
            "pct": 20,
            "type": "Transports",
            "email": "a@a",
            "fileUrl": FILE_URL,
            "date": "2001-01-01",
            "status": "refused",
            "commentAdmin": "en fait non",
        },
        {
            "id": "UIUZtnPQvnbFnB0ozvJh",
            "name": "test3",
            "email": "a@a",
            "type": "Services en ligne",
            "vat": "60",
            "pct": 20,
            "commentAdmin": "bon bah d'accord",
            "amount": 300,
            "status": "accepted",
            "date": "2003-03-03",
            "commentary": "",
            "fileName": "facture-client-php-exportee-dans-document-pdf-enregistre-sur-disque-dur.png",
            "fileUrl": FILE_URL,
        },
        {
            "id": "qcCK3SzECmaZAGRrHjaC",
            "status": "refused",
            "pct": 20,
            "amount": 200,
            "email": "a@a",
            "name": "test2",
            "vat": "40",
            "fileName": "preview-facture-free-201801-pdf-1.jpg",
            "date": "2002-02-02",
            "commentAdmin": "pas la bonne facture",
            "commentary": "test2",
            "type": "Restaurants et bars",
            "fileUrl": FILE_URL,
        },
    ]


@pytest.fixture
def make_store():
    """Build a mock store whose bills().list() resolves to `records`."""
    def _make(records=None, error=None):
        store = MagicMock()
        resource = store.bills.return_value
        if error is not None:
            resource.list = AsyncMock(side_effect=error)
        else:
            resource.list = AsyncMock(return_value=list(records or []))
        resource.create = AsyncMock(side_effect=lambda payload: {"id": "new", **payload})
        resource.update = AsyncMock(side_effect=lambda selector, payload: {"id": selector, **payload})
        return store
    return _make


@pytest.fixture
def failing_store(make_store):
    def _make(message="Erreur 404", status=404):
        return make_store(error=StoreError(message, status))
    return _make
