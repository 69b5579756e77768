import logging
import sqlite3

from ..db import get_conn, row_to_dict
from ..errors import NotFound
from ..utils import now_str
from .integrity import (
    ensure_association_available,
    ensure_product_exists,
    ensure_supplier_exists,
    translate_integrity_error,
)

log = logging.getLogger(__name__)

_ASSOC_COLS = "a.id, a.supplier_id, a.product_id, a.created_at"


def _nest(row, prefix: str) -> dict:
    """Separa as colunas ``prefix__*`` de um JOIN num dict aninhado."""
    out = {}
    for k in row.keys():
        if k.startswith(prefix + "__"):
            out[k[len(prefix) + 2:]] = row[k]
    return out


def _cols(table_alias: str, prefix: str, names) -> str:
    return ", ".join(f"{table_alias}.{n} AS {prefix}__{n}" for n in names)


_SUP_NAMES = ("id", "company_name", "cnpj", "address", "phone", "email",
              "contact_person", "created_at")
_PROD_NAMES = ("id", "name", "barcode", "description", "quantity", "category",
               "expiration_date", "image_url", "created_at")


def _base(row) -> dict:
    return {k: row[k] for k in ("id", "supplier_id", "product_id", "created_at")}


def list_associations():
    conn = get_conn()
    rows = conn.execute(f"""
        SELECT {_ASSOC_COLS},
               {_cols("s", "supplier", _SUP_NAMES)},
               {_cols("p", "product", _PROD_NAMES)}
        FROM supplier_product_associations a
        JOIN suppliers s ON s.id = a.supplier_id
        JOIN products  p ON p.id = a.product_id
        ORDER BY a.id
    """).fetchall()
    conn.close()
    return [dict(_base(r), supplier=_nest(r, "supplier"), product=_nest(r, "product"))
            for r in rows]


def list_by_product(product_id: int):
    conn = get_conn()
    rows = conn.execute(f"""
        SELECT {_ASSOC_COLS}, {_cols("s", "supplier", _SUP_NAMES)}
        FROM supplier_product_associations a
        JOIN suppliers s ON s.id = a.supplier_id
        WHERE a.product_id = ?
        ORDER BY a.id
    """, (product_id,)).fetchall()
    conn.close()
    return [dict(_base(r), supplier=_nest(r, "supplier")) for r in rows]


def list_by_supplier(supplier_id: int):
    conn = get_conn()
    rows = conn.execute(f"""
        SELECT {_ASSOC_COLS}, {_cols("p", "product", _PROD_NAMES)}
        FROM supplier_product_associations a
        JOIN products p ON p.id = a.product_id
        WHERE a.supplier_id = ?
        ORDER BY a.id
    """, (supplier_id,)).fetchall()
    conn.close()
    return [dict(_base(r), product=_nest(r, "product")) for r in rows]


def get_association(supplier_id: int, product_id: int):
    conn = get_conn()
    row = conn.execute(
        "SELECT * FROM supplier_product_associations WHERE supplier_id=? AND product_id=?",
        (supplier_id, product_id),
    ).fetchone()
    conn.close()
    return row_to_dict(row)


def create_association(supplier_id: int, product_id: int):
    conn = get_conn()
    try:
        ensure_supplier_exists(conn, supplier_id)
        ensure_product_exists(conn, product_id)
        ensure_association_available(conn, supplier_id, product_id)
        cur = conn.execute(
            "INSERT INTO supplier_product_associations(supplier_id, product_id, created_at) VALUES(?,?,?)",
            (supplier_id, product_id, now_str()),
        )
        conn.commit()
        row = conn.execute("SELECT * FROM supplier_product_associations WHERE id=?",
                           (cur.lastrowid,)).fetchone()
    except sqlite3.IntegrityError as e:
        conn.rollback()
        raise (translate_integrity_error(e) or e) from e
    finally:
        conn.close()
    log.info("fornecedor %s associado ao produto %s", supplier_id, product_id)
    return dict(row)


def delete_association(supplier_id: int, product_id: int):
    conn = get_conn()
    try:
        cur = conn.execute(
            "DELETE FROM supplier_product_associations WHERE supplier_id=? AND product_id=?",
            (supplier_id, product_id),
        )
        conn.commit()
    finally:
        conn.close()
    if cur.rowcount == 0:
        raise NotFound("Associação não encontrada.")
    log.info("associação %s/%s removida", supplier_id, product_id)
