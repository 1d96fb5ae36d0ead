import json
import uuid
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class BillRecord(BaseModel):
    """A bill exactly as the store returned it. `date` may be malformed."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    email: Optional[str] = None
    type: Optional[str] = None
    name: Optional[str] = None
    amount: Optional[float] = None
    date: Any = None
    status: Any = None
    vat: Optional[str] = None
    pct: Optional[float] = None
    commentary: Optional[str] = None
    commentAdmin: Optional[str] = None
    fileUrl: Optional[str] = None
    fileName: Optional[str] = None


class DisplayBillRecord(BillRecord):
    # formatted date, or the raw one when it could not be parsed
    date: Any = None
    status: str = ""


class BillIn(BaseModel):
    email: str
    type: str
    name: str
    amount: float
    date: str
    vat: Optional[str] = None
    pct: Optional[float] = 20
    commentary: Optional[str] = None
    fileUrl: Optional[str] = None
    fileName: Optional[str] = None
    status: str = "pending"  # pending | accepted | refused


class Bill(BillIn):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    commentAdmin: Optional[str] = None


class BillUpdate(BaseModel):
    type: Optional[str] = None
    name: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[str] = None
    vat: Optional[str] = None
    pct: Optional[float] = None
    commentary: Optional[str] = None
    commentAdmin: Optional[str] = None
    fileUrl: Optional[str] = None
    fileName: Optional[str] = None
    status: Optional[str] = None


class SessionUser(BaseModel):
    """Logged-in user context, stored under the `user` session key."""

    model_config = ConfigDict(frozen=True)

    type: str = "Employee"
    email: Optional[str] = None

    @classmethod
    def from_json(cls, raw: Union[str, bytes, None]) -> Optional["SessionUser"]:
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        try:
            return cls(**{k: v for k, v in data.items() if k in ("type", "email")})
        except ValidationError:
            return None


class ReceiptModal(BaseModel):
    visible: bool = False
    image_url: str = ""
    width: int = 0
