import logging
import sqlite3

from ..db import get_conn, row_to_dict
from ..errors import NotFound, ValidationFailed
from ..utils import clean_str, now_str
from .integrity import ensure_barcode_available, translate_integrity_error

log = logging.getLogger(__name__)

FIELDS = ("name", "barcode", "description", "quantity", "category",
          "expiration_date", "image_url")


def _clean(data: dict) -> dict:
    out = {k: data[k] for k in FIELDS if k in data}
    if "barcode" in out:
        # vazio == ausente (NULL não conflita no UNIQUE)
        out["barcode"] = clean_str(out["barcode"])
    if "quantity" in out:
        try:
            out["quantity"] = int(out["quantity"] or 0)
        except (TypeError, ValueError):
            raise ValidationFailed({"quantity": ["Quantidade deve ser um número inteiro"]}) from None
        if out["quantity"] < 0:
            raise ValidationFailed({"quantity": ["Quantidade deve ser maior ou igual a 0"]})
    if out.get("expiration_date") is not None:
        out["expiration_date"] = str(out["expiration_date"])
    return out


def list_products():
    conn = get_conn()
    rows = conn.execute("SELECT * FROM products ORDER BY id").fetchall()
    conn.close()
    return [dict(r) for r in rows]


def get_product(pid: int):
    conn = get_conn()
    row = conn.execute("SELECT * FROM products WHERE id=?", (pid,)).fetchone()
    conn.close()
    return row_to_dict(row)


def get_product_by_barcode(barcode: str):
    barcode = clean_str(barcode)
    if not barcode:
        return None
    conn = get_conn()
    row = conn.execute("SELECT * FROM products WHERE barcode=?", (barcode,)).fetchone()
    conn.close()
    return row_to_dict(row)


def create_product(data: dict):
    fields = _clean(data)
    fields.setdefault("quantity", 0)
    conn = get_conn()
    try:
        ensure_barcode_available(conn, fields.get("barcode"))
        cur = conn.execute(
            """INSERT INTO products(name,barcode,description,quantity,category,expiration_date,image_url,created_at)
               VALUES(?,?,?,?,?,?,?,?)""",
            (fields["name"], fields.get("barcode"), fields["description"], fields["quantity"],
             fields["category"], fields.get("expiration_date"), fields.get("image_url"), now_str()),
        )
        conn.commit()
        pid = cur.lastrowid
        row = conn.execute("SELECT * FROM products WHERE id=?", (pid,)).fetchone()
    except sqlite3.IntegrityError as e:
        conn.rollback()
        raise (translate_integrity_error(e) or e) from e
    finally:
        conn.close()
    log.info("produto %s criado (%s)", pid, fields["name"])
    return dict(row)


def update_product(pid: int, data: dict):
    """Atualização parcial; ``barcode`` só é checado se vier preenchido."""
    fields = _clean(data)
    conn = get_conn()
    try:
        if not conn.execute("SELECT 1 FROM products WHERE id=?", (pid,)).fetchone():
            raise NotFound("Produto não encontrado.")
        if fields.get("barcode"):
            ensure_barcode_available(conn, fields["barcode"], exclude_id=pid)
        if fields:
            sets = ", ".join(f"{k}=?" for k in fields)
            conn.execute(f"UPDATE products SET {sets} WHERE id=?", (*fields.values(), pid))
            conn.commit()
        row = conn.execute("SELECT * FROM products WHERE id=?", (pid,)).fetchone()
    except sqlite3.IntegrityError as e:
        conn.rollback()
        raise (translate_integrity_error(e) or e) from e
    finally:
        conn.close()
    log.info("produto %s atualizado (%s)", pid, ", ".join(fields) or "sem mudanças")
    return dict(row)


def delete_product(pid: int):
    """Remove o produto e, via cascade, as associações dele. Devolve o registro removido."""
    conn = get_conn()
    try:
        row = conn.execute("SELECT * FROM products WHERE id=?", (pid,)).fetchone()
        if not row:
            raise NotFound("Produto não encontrado.")
        conn.execute("DELETE FROM products WHERE id=?", (pid,))
        conn.commit()
    finally:
        conn.close()
    log.info("produto %s removido", pid)
    return dict(row)
