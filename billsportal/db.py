import sqlite3
from typing import List, Dict, Any, Optional

from .config import DB_PATH

COLUMNS = (
    "id", "email", "type", "name", "amount", "date", "vat", "pct",
    "commentary", "commentAdmin", "fileUrl", "fileName", "status",
)


def get_conn(db_path: Optional[str] = None):
    conn = sqlite3.connect(db_path or DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: Optional[str] = None):
    conn = get_conn(db_path)
    cur = conn.cursor()
    # date stays TEXT: rows written by other clients are not guaranteed to be ISO
    cur.execute("""
    CREATE TABLE IF NOT EXISTS bills (
        id TEXT PRIMARY KEY,
        email TEXT,
        type TEXT,
        name TEXT,
        amount REAL,
        date TEXT,
        vat TEXT,
        pct REAL,
        commentary TEXT,
        commentAdmin TEXT,
        fileUrl TEXT,
        fileName TEXT,
        status TEXT NOT NULL DEFAULT 'pending'
    )
    """)
    conn.commit()
    conn.close()


def insert_bill(b: Dict[str, Any], db_path: Optional[str] = None):
    row = {c: b.get(c) for c in COLUMNS}
    conn = get_conn(db_path)
    cur = conn.cursor()
    cur.execute(f"""
        INSERT INTO bills ({", ".join(COLUMNS)})
        VALUES ({", ".join(":" + c for c in COLUMNS)})
    """, row)
    conn.commit()
    conn.close()


def list_bills(email: Optional[str] = None, db_path: Optional[str] = None) -> List[Dict[str, Any]]:
    conn = get_conn(db_path)
    cur = conn.cursor()
    # rowid order is insertion order, which callers rely on for stable ties
    if email:
        cur.execute("SELECT * FROM bills WHERE email = ? ORDER BY rowid ASC", (email,))
    else:
        cur.execute("SELECT * FROM bills ORDER BY rowid ASC")
    rows = [dict(r) for r in cur.fetchall()]
    conn.close()
    return rows


def get_bill(bill_id: str, db_path: Optional[str] = None) -> Optional[Dict[str, Any]]:
    conn = get_conn(db_path)
    cur = conn.cursor()
    cur.execute("SELECT * FROM bills WHERE id = ?", (bill_id,))
    row = cur.fetchone()
    conn.close()
    return dict(row) if row else None


def update_bill(bill_id: str, fields: Dict[str, Any], db_path: Optional[str] = None) -> bool:
    fields = {k: v for k, v in fields.items() if k in COLUMNS and k != "id"}
    if not fields:
        return get_bill(bill_id, db_path) is not None
    assignments = ", ".join(f"{k} = :{k}" for k in fields)
    conn = get_conn(db_path)
    cur = conn.cursor()
    cur.execute(f"UPDATE bills SET {assignments} WHERE id = :id", {**fields, "id": bill_id})
    conn.commit()
    ok = cur.rowcount > 0
    conn.close()
    return ok
