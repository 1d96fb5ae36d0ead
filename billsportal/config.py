import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

DB_PATH = (
    os.environ.get("BILLS_DB_PATH")
    or os.environ.get("DB_PATH")
    or "billsportal.sqlite3"  # fallback
)


@dataclass
class Settings:
    db_path: str = DB_PATH
    store: str = "sqlite"  # sqlite | api
    api_url: str = "http://localhost:5678"
    api_token: str = ""
    api_timeout: float = 10.0
    modal_width: int = 800
    docs_enabled: bool = False
    cors_origins: list = field(default_factory=list)
    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings(
        db_path=DB_PATH,
        store=os.getenv("BILLS_STORE", "sqlite").lower(),
        api_url=os.getenv("BILLS_API_URL", "http://localhost:5678").rstrip("/"),
        api_token=os.getenv("BILLS_API_TOKEN", ""),
        api_timeout=float(os.getenv("BILLS_API_TIMEOUT", "10")),
        modal_width=int(os.getenv("BILLS_MODAL_WIDTH", "800")),
        docs_enabled=os.getenv("BILLS_DOCS", "0") == "1",
        cors_origins=[o for o in os.getenv("BILLS_CORS", "").split(",") if o],
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
