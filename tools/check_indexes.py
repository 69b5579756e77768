# tools/check_indexes.py
# Lista os índices/constraints UNIQUE que garantem a integridade do cadastro.
import logging

from supplierhub import create_app
from supplierhub.db import get_conn

TABLES = ("suppliers", "products", "supplier_product_associations")

if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    app = create_app()
    with app.app_context():
        conn = get_conn()
        for table in TABLES:
            for r in conn.execute(f"PRAGMA index_list('{table}')").fetchall():
                cols = [c["name"] for c in conn.execute(f"PRAGMA index_info('{r['name']}')")]
                print(f"{table:32} {r['name']:45} unique={r['unique']} cols={cols}")
            for fk in conn.execute(f"PRAGMA foreign_key_list('{table}')").fetchall():
                print(f"{table:32} FK {fk['from']} -> {fk['table']}.{fk['to']} on_delete={fk['on_delete']}")
        conn.close()
