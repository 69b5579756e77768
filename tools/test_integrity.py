# tools/test_integrity.py
import pytest

from conftest import OTHER_CNPJ, VALID_CNPJ, product_payload, supplier_payload
from supplierhub.db import get_conn
from supplierhub.errors import (
    DuplicateAssociation,
    DuplicateIdentifier,
    InvalidIdentifier,
    NotFound,
    ValidationFailed,
)
from supplierhub.services import associations, products, suppliers
from supplierhub.services.integrity import (
    ensure_association_available,
    ensure_barcode_available,
    ensure_cnpj_available,
)
from supplierhub.utils import now_str


def _count_assocs():
    conn = get_conn()
    n = conn.execute("SELECT COUNT(*) FROM supplier_product_associations").fetchone()[0]
    conn.close()
    return n


def test_supplier_cnpj_is_stored_canonical(app):
    s = suppliers.create_supplier(supplier_payload(cnpj="11444777000161", phone="11999998888"))
    assert s["cnpj"] == VALID_CNPJ
    assert s["phone"] == "(11) 99999-8888"
    assert s["created_at"]


def test_supplier_invalid_cnpj_rejected(app):
    with pytest.raises(InvalidIdentifier):
        suppliers.create_supplier(supplier_payload(cnpj="11.444.777/0001-62"))
    assert suppliers.list_suppliers() == []


def test_fullwidth_cnpj_clone_rejected(app):
    suppliers.create_supplier(supplier_payload())
    with pytest.raises(InvalidIdentifier):
        suppliers.create_supplier(supplier_payload(cnpj="１１４４４７７７０００１６１"))
    assert [s["cnpj"] for s in suppliers.list_suppliers()] == [VALID_CNPJ]


def test_duplicate_cnpj_any_punctuation(app):
    suppliers.create_supplier(supplier_payload())
    with pytest.raises(DuplicateIdentifier) as exc:
        suppliers.create_supplier(supplier_payload(cnpj="11444777000161", company_name="Outra"))
    assert exc.value.field == "cnpj"
    assert len(suppliers.list_suppliers()) == 1


def test_update_supplier_cnpj_conflict(app):
    a = suppliers.create_supplier(supplier_payload())
    b = suppliers.create_supplier(supplier_payload(cnpj=OTHER_CNPJ))
    with pytest.raises(DuplicateIdentifier):
        suppliers.update_supplier(b["id"], {"cnpj": VALID_CNPJ})
    # manter o próprio CNPJ não é conflito
    same = suppliers.update_supplier(a["id"], {"cnpj": VALID_CNPJ, "company_name": "ACME SA"})
    assert same["company_name"] == "ACME SA"


def test_update_supplier_partial_keeps_other_fields(app):
    s = suppliers.create_supplier(supplier_payload())
    up = suppliers.update_supplier(s["id"], {"email": "novo@acme.com.br"})
    assert up["email"] == "novo@acme.com.br"
    assert up["address"] == s["address"]


def test_update_or_delete_missing_supplier(app):
    with pytest.raises(NotFound):
        suppliers.update_supplier(999, {"email": "x@y.com"})
    with pytest.raises(NotFound):
        suppliers.delete_supplier(999)


def test_barcode_optional_and_unique(app):
    products.create_product(product_payload(barcode=None))
    products.create_product(product_payload(barcode=""))
    products.create_product(product_payload())
    with pytest.raises(DuplicateIdentifier) as exc:
        products.create_product(product_payload(name="Outra caneta"))
    assert exc.value.field == "barcode"
    assert len(products.list_products()) == 3


def test_update_product_barcode_conflict(app):
    p1 = products.create_product(product_payload())
    p2 = products.create_product(product_payload(barcode="123"))
    with pytest.raises(DuplicateIdentifier):
        products.update_product(p2["id"], {"barcode": "7891234567895"})
    assert products.update_product(p1["id"], {"barcode": "7891234567895"})["id"] == p1["id"]


def test_product_quantity_defaults_to_zero(app):
    data = product_payload()
    del data["quantity"]
    assert products.create_product(data)["quantity"] == 0


@pytest.mark.parametrize("quantity", ["abc", "1.5", [3]])
def test_product_quantity_must_be_integer(app, quantity):
    with pytest.raises(ValidationFailed) as exc:
        products.create_product(product_payload(quantity=quantity))
    assert "quantity" in exc.value.errors
    assert products.list_products() == []


def test_duplicate_association_and_reacquire(app):
    s = suppliers.create_supplier(supplier_payload())
    p = products.create_product(product_payload())
    associations.create_association(s["id"], p["id"])
    with pytest.raises(DuplicateAssociation):
        associations.create_association(s["id"], p["id"])
    associations.delete_association(s["id"], p["id"])
    assert associations.get_association(s["id"], p["id"]) is None
    assert associations.create_association(s["id"], p["id"])["supplier_id"] == s["id"]


def test_association_requires_existing_records(app):
    s = suppliers.create_supplier(supplier_payload())
    with pytest.raises(NotFound):
        associations.create_association(s["id"], 404)
    with pytest.raises(NotFound):
        associations.create_association(404, 1)
    with pytest.raises(NotFound):
        associations.delete_association(s["id"], 404)


def test_delete_supplier_cascades_only_its_associations(app):
    s1 = suppliers.create_supplier(supplier_payload())
    s2 = suppliers.create_supplier(supplier_payload(cnpj=OTHER_CNPJ))
    p1 = products.create_product(product_payload())
    p2 = products.create_product(product_payload(barcode="123"))
    p3 = products.create_product(product_payload(barcode="456"))
    for p in (p1, p2, p3):
        associations.create_association(s1["id"], p["id"])
    associations.create_association(s2["id"], p1["id"])
    assert _count_assocs() == 4

    suppliers.delete_supplier(s1["id"])

    assert _count_assocs() == 1
    left = associations.list_associations()
    assert [(a["supplier_id"], a["product_id"]) for a in left] == [(s2["id"], p1["id"])]
    assert len(products.list_products()) == 3


def test_delete_product_cascades(app):
    s = suppliers.create_supplier(supplier_payload())
    p1 = products.create_product(product_payload())
    p2 = products.create_product(product_payload(barcode="123"))
    associations.create_association(s["id"], p1["id"])
    associations.create_association(s["id"], p2["id"])

    products.delete_product(p1["id"])

    assert [a["product"]["id"] for a in associations.list_by_supplier(s["id"])] == [p2["id"]]
    assert associations.list_by_product(p1["id"]) == []


def test_joined_listings(app):
    s = suppliers.create_supplier(supplier_payload())
    p = products.create_product(product_payload())
    associations.create_association(s["id"], p["id"])
    a = associations.list_associations()[0]
    assert a["supplier"]["cnpj"] == VALID_CNPJ
    assert a["product"]["barcode"] == "7891234567895"
    assert associations.list_by_product(p["id"])[0]["supplier"]["company_name"] == "ACME Distribuidora"


def test_guards_exclude_own_record(app):
    s = suppliers.create_supplier(supplier_payload())
    p = products.create_product(product_payload())
    conn = get_conn()
    try:
        ensure_cnpj_available(conn, VALID_CNPJ, exclude_id=s["id"])
        ensure_barcode_available(conn, "7891234567895", exclude_id=p["id"])
        ensure_barcode_available(conn, None)
        with pytest.raises(DuplicateIdentifier):
            ensure_cnpj_available(conn, VALID_CNPJ)
        ensure_association_available(conn, s["id"], p["id"])
    finally:
        conn.close()


def test_unique_constraint_is_authoritative(app, monkeypatch):
    """Se a pré-checagem perder a corrida, o UNIQUE do banco ainda rejeita."""
    suppliers.create_supplier(supplier_payload())
    monkeypatch.setattr(suppliers, "ensure_cnpj_available", lambda *a, **k: None)
    with pytest.raises(DuplicateIdentifier) as exc:
        suppliers.create_supplier(supplier_payload())
    assert exc.value.field == "cnpj"

    p = products.create_product(product_payload())
    monkeypatch.setattr(products, "ensure_barcode_available", lambda *a, **k: None)
    with pytest.raises(DuplicateIdentifier) as exc:
        products.create_product(product_payload(name="Outra"))
    assert exc.value.field == "barcode"
    other = products.create_product(product_payload(barcode="123"))
    with pytest.raises(DuplicateIdentifier) as exc:
        products.update_product(other["id"], {"barcode": "7891234567895"})
    assert exc.value.field == "barcode"
    assert len(products.list_products()) == 2

    s = suppliers.list_suppliers()[0]
    conn = get_conn()
    conn.execute("INSERT INTO supplier_product_associations(supplier_id, product_id, created_at) VALUES(?,?,?)",
                 (s["id"], p["id"], now_str()))
    conn.commit()
    conn.close()
    monkeypatch.setattr("supplierhub.services.associations.ensure_association_available",
                        lambda *a, **k: None)
    with pytest.raises(DuplicateAssociation):
        associations.create_association(s["id"], p["id"])
