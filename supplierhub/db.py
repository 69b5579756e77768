import logging
import sqlite3
from flask import current_app

log = logging.getLogger(__name__)

# ==============================
# Conexão + PRAGMAs recomendados
# ==============================
def get_conn():
    db_path = current_app.config["DB_PATH"]
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")        # obrigatório para o ON DELETE CASCADE
    conn.execute("PRAGMA journal_mode = WAL;")
    conn.execute("PRAGMA synchronous = NORMAL;")
    conn.execute("PRAGMA busy_timeout = 3000;")      # espera 3s se DB estiver ocupado
    conn.execute("PRAGMA temp_store = MEMORY;")
    return conn

def row_to_dict(row):
    return dict(row) if row is not None else None

# ==============================
# Criação de schema base
# ==============================
def _create_base_tables(c):
    # cnpj é guardado sempre na forma canônica (18 chars, pontuado)
    c.execute("""CREATE TABLE IF NOT EXISTS suppliers(
        id             INTEGER PRIMARY KEY AUTOINCREMENT,
        company_name   TEXT NOT NULL,
        cnpj           VARCHAR(18) NOT NULL UNIQUE,
        address        TEXT NOT NULL,
        phone          VARCHAR(15) NOT NULL,
        email          TEXT NOT NULL,
        contact_person TEXT NOT NULL,
        created_at     TEXT
    )""")

    # barcode opcional: NULL não conflita com o UNIQUE
    c.execute("""CREATE TABLE IF NOT EXISTS products(
        id              INTEGER PRIMARY KEY AUTOINCREMENT,
        name            TEXT NOT NULL,
        barcode         VARCHAR(50) UNIQUE,
        description     TEXT NOT NULL,
        quantity        INTEGER NOT NULL DEFAULT 0 CHECK(quantity >= 0),
        category        TEXT NOT NULL,
        expiration_date TEXT,
        image_url       TEXT,
        created_at      TEXT
    )""")

    c.execute("""CREATE TABLE IF NOT EXISTS supplier_product_associations(
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        supplier_id INTEGER NOT NULL,
        product_id  INTEGER NOT NULL,
        created_at  TEXT,
        UNIQUE(supplier_id, product_id),
        FOREIGN KEY(supplier_id) REFERENCES suppliers(id) ON DELETE CASCADE,
        FOREIGN KEY(product_id)  REFERENCES products(id)  ON DELETE CASCADE
    )""")

# ==============================
# Índices
# ==============================
def apply_indexes(c):
    c.execute("CREATE INDEX IF NOT EXISTS idx_suppliers_name ON suppliers(company_name)")
    c.execute("CREATE INDEX IF NOT EXISTS idx_products_name  ON products(name)")
    c.execute("CREATE INDEX IF NOT EXISTS idx_products_cat   ON products(category)")
    # lookup por produto (o UNIQUE(supplier_id, product_id) já cobre supplier_id)
    c.execute("CREATE INDEX IF NOT EXISTS idx_assoc_product  ON supplier_product_associations(product_id)")

# ==============================
# INIT DB (idempotente)
# ==============================
def init_db():
    conn = get_conn()
    c = conn.cursor()
    _create_base_tables(c)
    apply_indexes(c)
    conn.commit()
    conn.close()
    log.info("schema pronto em %s", current_app.config["DB_PATH"])
