import os

class Config:
    APP_SECRET = os.environ.get("APP_SECRET", "dev-key")
    DB_PATH = os.environ.get("DB_PATH", "cadastro.db")
    UPLOAD_DIR = os.environ.get("UPLOAD_DIR", "uploads")
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_UPLOAD_MB", "10")) * 1024 * 1024
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
