"""Markup for the employee pages. Every function here is pure: data in, HTML out."""
from html import escape
from typing import Any, Iterable, Optional

from .models import ReceiptModal


def _text(value: Any) -> str:
    return escape("" if value is None else str(value))


def vertical_layout(active: Optional[str] = None) -> str:
    def icon(test_id: str, label: str) -> str:
        cls = "layout-icon active-icon" if active == test_id else "layout-icon"
        return f'<div id="layout-icon-{test_id}" data-testid="{test_id}" class="{cls}">{label}</div>'

    return f"""
      <div class="vertical-navbar">
        <div class="layout-title">Billed</div>
        {icon("icon-window", "Notes de frais")}
        {icon("icon-mail", "Nouvelle note")}
      </div>"""


def loading_page() -> str:
    return f"""
      <div class="layout">
        {vertical_layout("icon-window")}
        <div class="content" id="loading">Loading...</div>
      </div>"""


def error_page(error: Optional[str] = None) -> str:
    return f"""
      <div class="layout">
        {vertical_layout("icon-window")}
        <div class="content">
          <div id="error-message" data-testid="error-message">{_text(error)}</div>
        </div>
      </div>"""


def receipt_modal(modal: Optional[ReceiptModal] = None) -> str:
    modal = modal or ReceiptModal()
    body = ""
    if modal.visible:
        if modal.image_url:
            body = (
                f'<div style="text-align: center;" class="bill-proof-container">'
                f'<img width="{modal.width}" src="{_text(modal.image_url)}" alt="Bill" /></div>'
            )
        else:
            body = '<div class="bill-proof-container">Aucun justificatif</div>'
    cls = "modal fade show" if modal.visible else "modal fade"
    return f"""
      <div class="{cls}" id="modaleFile" data-testid="modaleFile" tabindex="-1" role="dialog">
        <div class="modal-dialog modal-dialog-centered modal-lg" role="document">
          <div class="modal-content">
            <div class="modal-header"><h5 class="modal-title">Justificatif</h5></div>
            <div class="modal-body">{body}</div>
          </div>
        </div>
      </div>"""


def _row(bill) -> str:
    return f"""
        <tr>
          <td>{_text(bill.type)}</td>
          <td>{_text(bill.name)}</td>
          <td>{_text(bill.date)}</td>
          <td>{_text(bill.amount)} €</td>
          <td>{_text(bill.status)}</td>
          <td>
            <div class="icon-actions">
              <div id="eye" data-testid="icon-eye" data-bill-url="{_text(bill.fileUrl)}">Voir</div>
            </div>
          </td>
        </tr>"""


def bills_ui(
    data: Optional[Iterable[Any]] = None,
    error: Optional[str] = None,
    loading: bool = False,
    modal: Optional[ReceiptModal] = None,
) -> str:
    """Bills table, or the loading/error page. Rows are rendered in the order given."""
    if loading:
        return loading_page()
    if error:
        return error_page(error)
    rows = "".join(_row(b) for b in (data or []))
    return f"""
      <div class="layout">
        {vertical_layout("icon-window")}
        <div class="content">
          <div class="content-header">
            <div class="content-title">Mes notes de frais</div>
            <button type="button" data-testid="btn-new-bill" class="btn btn-primary">Nouvelle note de frais</button>
          </div>
          <div id="data-table">
            <table id="example" class="table table-striped">
              <thead>
                <tr><th>Type</th><th>Nom</th><th>Date</th><th>Montant</th><th>Statut</th><th>Actions</th></tr>
              </thead>
              <tbody data-testid="tbody">{rows}
              </tbody>
            </table>
          </div>
        </div>
        {receipt_modal(modal)}
      </div>"""


def new_bill_ui() -> str:
    return f"""
      <div class="layout">
        {vertical_layout("icon-mail")}
        <div class="content">
          <div class="content-title">Envoyer une note de frais</div>
          <form data-testid="form-new-bill" method="post" action="/api/bills"></form>
        </div>
      </div>"""


def login_ui() -> str:
    return """
      <div class="login-page" data-testid="login-page">
        <h1>Billed</h1>
        <p>Please sign in to see your bills.</p>
      </div>"""


def page(title: str, body: str) -> str:
    return f"""<!doctype html>
<html><head><meta charset="utf-8"/><title>{_text(title)}</title></head>
<body style="font-family:system-ui"><div id="root">{body}</div></body></html>"""
