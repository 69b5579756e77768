# tools/seed_sample.py
# Popula a base com um fornecedor, um produto e a associação entre eles (idempotente).
import logging

from supplierhub import create_app
from supplierhub.errors import DuplicateAssociation
from supplierhub.services import associations, products, suppliers
from supplierhub.utils_cnpj import normalize_cnpj

log = logging.getLogger("seed_sample")

SUPPLIER = {
    "company_name": "ACME Distribuidora Ltda",
    "cnpj": "11.444.777/0001-61",
    "address": "Rua das Flores, 100 - São Paulo/SP",
    "phone": "11999998888",
    "email": "contato@acme.com.br",
    "contact_person": "Maria Souza",
}
PRODUCT = {
    "name": "Caneta Azul",
    "barcode": "7891234567895",
    "description": "Caneta esferográfica azul 1.0mm",
    "quantity": 50,
    "category": "other",
}

def seed():
    s = suppliers.get_supplier_by_cnpj(normalize_cnpj(SUPPLIER["cnpj"]))
    if s is None:
        s = suppliers.create_supplier(SUPPLIER)
        log.info("[OK] Fornecedor criado: %s (id=%s)", s["company_name"], s["id"])
    else:
        log.info("[=] Fornecedor já existia: id=%s", s["id"])

    p = products.get_product_by_barcode(PRODUCT["barcode"])
    if p is None:
        p = products.create_product(PRODUCT)
        log.info("[OK] Produto criado: %s (id=%s)", p["name"], p["id"])
    else:
        log.info("[=] Produto já existia: id=%s", p["id"])

    try:
        associations.create_association(s["id"], p["id"])
        log.info("[OK] Associação %s/%s criada", s["id"], p["id"])
    except DuplicateAssociation:
        log.info("[=] Associação já existia — pulando")

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app()
    with app.app_context():
        seed()
