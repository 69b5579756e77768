"""Regras de integridade aplicadas antes de cada escrita.

As consultas aqui só servem para devolver um motivo amigável. A garantia
de verdade são as constraints UNIQUE/FOREIGN KEY do schema (``db.py``):
quem perder uma corrida entre a checagem e o INSERT recebe o mesmo erro
via ``translate_integrity_error``.
"""
import logging
import sqlite3

from ..errors import DuplicateAssociation, DuplicateIdentifier, NotFound

log = logging.getLogger(__name__)

MSG_CNPJ_DUP = "Fornecedor com esse CNPJ já está cadastrado!"
MSG_BARCODE_DUP = "Produto com este código de barras já está cadastrado!"
MSG_ASSOC_DUP = "Fornecedor já está associado a este produto!"


def ensure_cnpj_available(conn, cnpj: str, exclude_id=None):
    row = conn.execute("SELECT id FROM suppliers WHERE cnpj=?", (cnpj,)).fetchone()
    if row and row["id"] != exclude_id:
        log.warning("CNPJ %s já pertence ao fornecedor %s", cnpj, row["id"])
        raise DuplicateIdentifier(MSG_CNPJ_DUP, field="cnpj")


def ensure_barcode_available(conn, barcode, exclude_id=None):
    if not barcode:
        return
    row = conn.execute("SELECT id FROM products WHERE barcode=?", (barcode,)).fetchone()
    if row and row["id"] != exclude_id:
        log.warning("código de barras %s já pertence ao produto %s", barcode, row["id"])
        raise DuplicateIdentifier(MSG_BARCODE_DUP, field="barcode")


def ensure_association_available(conn, supplier_id: int, product_id: int):
    row = conn.execute(
        "SELECT id FROM supplier_product_associations WHERE supplier_id=? AND product_id=?",
        (supplier_id, product_id),
    ).fetchone()
    if row:
        log.warning("associação %s/%s já existe", supplier_id, product_id)
        raise DuplicateAssociation(MSG_ASSOC_DUP)


def ensure_supplier_exists(conn, supplier_id: int):
    if not conn.execute("SELECT 1 FROM suppliers WHERE id=?", (supplier_id,)).fetchone():
        raise NotFound("Fornecedor não encontrado.", field="supplier_id")


def ensure_product_exists(conn, product_id: int):
    if not conn.execute("SELECT 1 FROM products WHERE id=?", (product_id,)).fetchone():
        raise NotFound("Produto não encontrado.", field="product_id")


def translate_integrity_error(exc: sqlite3.IntegrityError):
    """Converte a violação de constraint no erro de domínio equivalente."""
    msg = str(exc)
    if "suppliers.cnpj" in msg:
        return DuplicateIdentifier(MSG_CNPJ_DUP, field="cnpj")
    if "products.barcode" in msg:
        return DuplicateIdentifier(MSG_BARCODE_DUP, field="barcode")
    if "supplier_product_associations" in msg and "UNIQUE" in msg:
        return DuplicateAssociation(MSG_ASSOC_DUP)
    if "FOREIGN KEY" in msg:
        return NotFound("Fornecedor ou produto não encontrado.")
    return None
