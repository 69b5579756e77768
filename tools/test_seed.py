# tools/test_seed.py
from seed_sample import seed
from supplierhub.services import associations, products, suppliers


def test_seed_is_idempotent(app):
    seed()
    seed()
    assert len(suppliers.list_suppliers()) == 1
    assert len(products.list_products()) == 1
    a = associations.list_associations()
    assert len(a) == 1
    assert a[0]["supplier"]["phone"] == "(11) 99999-8888"
