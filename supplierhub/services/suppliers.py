import logging
import sqlite3

from ..db import get_conn, row_to_dict
from ..errors import NotFound
from ..utils import now_str
from ..utils_cnpj import format_phone, normalize_cnpj
from .integrity import ensure_cnpj_available, translate_integrity_error

log = logging.getLogger(__name__)

FIELDS = ("company_name", "cnpj", "address", "phone", "email", "contact_person")


def _clean(data: dict) -> dict:
    """Mantém só os campos conhecidos e aplica a forma canônica de cnpj/telefone."""
    out = {k: data[k] for k in FIELDS if k in data}
    if "cnpj" in out:
        out["cnpj"] = normalize_cnpj(out["cnpj"])
    if "phone" in out:
        out["phone"] = format_phone(out["phone"])
    return out


def list_suppliers():
    conn = get_conn()
    rows = conn.execute("SELECT * FROM suppliers ORDER BY id").fetchall()
    conn.close()
    return [dict(r) for r in rows]


def get_supplier(sid: int):
    conn = get_conn()
    row = conn.execute("SELECT * FROM suppliers WHERE id=?", (sid,)).fetchone()
    conn.close()
    return row_to_dict(row)


def get_supplier_by_cnpj(cnpj: str):
    conn = get_conn()
    row = conn.execute("SELECT * FROM suppliers WHERE cnpj=?", (cnpj,)).fetchone()
    conn.close()
    return row_to_dict(row)


def create_supplier(data: dict):
    fields = _clean(data)
    conn = get_conn()
    try:
        ensure_cnpj_available(conn, fields["cnpj"])
        cur = conn.execute(
            """INSERT INTO suppliers(company_name,cnpj,address,phone,email,contact_person,created_at)
               VALUES(?,?,?,?,?,?,?)""",
            (fields["company_name"], fields["cnpj"], fields["address"], fields["phone"],
             fields["email"], fields["contact_person"], now_str()),
        )
        conn.commit()
        sid = cur.lastrowid
        row = conn.execute("SELECT * FROM suppliers WHERE id=?", (sid,)).fetchone()
    except sqlite3.IntegrityError as e:
        conn.rollback()
        raise (translate_integrity_error(e) or e) from e
    finally:
        conn.close()
    log.info("fornecedor %s criado (cnpj %s)", sid, fields["cnpj"])
    return dict(row)


def update_supplier(sid: int, data: dict):
    """Atualização parcial: só os campos presentes em ``data`` são trocados."""
    fields = _clean(data)
    conn = get_conn()
    try:
        if not conn.execute("SELECT 1 FROM suppliers WHERE id=?", (sid,)).fetchone():
            raise NotFound("Fornecedor não encontrado.")
        if "cnpj" in fields:
            ensure_cnpj_available(conn, fields["cnpj"], exclude_id=sid)
        if fields:
            sets = ", ".join(f"{k}=?" for k in fields)
            conn.execute(f"UPDATE suppliers SET {sets} WHERE id=?", (*fields.values(), sid))
            conn.commit()
        row = conn.execute("SELECT * FROM suppliers WHERE id=?", (sid,)).fetchone()
    except sqlite3.IntegrityError as e:
        conn.rollback()
        raise (translate_integrity_error(e) or e) from e
    finally:
        conn.close()
    log.info("fornecedor %s atualizado (%s)", sid, ", ".join(fields) or "sem mudanças")
    return dict(row)


def delete_supplier(sid: int):
    """Remove o fornecedor; as associações caem junto pelo ON DELETE CASCADE."""
    conn = get_conn()
    try:
        cur = conn.execute("DELETE FROM suppliers WHERE id=?", (sid,))
        conn.commit()
    finally:
        conn.close()
    if cur.rowcount == 0:
        raise NotFound("Fornecedor não encontrado.")
    log.info("fornecedor %s removido", sid)
