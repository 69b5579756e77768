# tools/conftest.py
import pytest

from supplierhub import create_app

VALID_CNPJ = "11.444.777/0001-61"
OTHER_CNPJ = "11.222.333/0001-81"

@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "WTF_CSRF_ENABLED": False,  # desliga CSRF só no client de teste
        "DB_PATH": str(tmp_path / "teste.db"),
        "UPLOAD_DIR": str(tmp_path / "uploads"),
    })
    with app.app_context():
        yield app

@pytest.fixture
def client(app):
    return app.test_client()

def supplier_payload(cnpj=VALID_CNPJ, **kw):
    data = {
        "company_name": "ACME Distribuidora",
        "cnpj": cnpj,
        "address": "Rua das Flores, 100 - São Paulo/SP",
        "phone": "1133334444",
        "email": "contato@acme.com.br",
        "contact_person": "Maria",
    }
    data.update(kw)
    return data

def product_payload(**kw):
    data = {
        "name": "Caneta Azul",
        "barcode": "7891234567895",
        "description": "Caneta esferográfica azul",
        "quantity": "20",
        "category": "other",
    }
    data.update(kw)
    return data
