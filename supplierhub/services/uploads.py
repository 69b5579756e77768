import logging
import os
import random
import time

from flask import current_app
from werkzeug.utils import secure_filename

log = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ["png", "jpg", "jpeg", "gif", "webp"]
URL_PREFIX = "/uploads/"


def upload_dir() -> str:
    path = os.path.abspath(current_app.config["UPLOAD_DIR"])
    os.makedirs(path, exist_ok=True)
    return path


def save_image(storage, field="image"):
    """Grava o arquivo enviado e devolve a URL pública (``/uploads/<nome>``)."""
    if not storage or not storage.filename:
        return None
    _, ext = os.path.splitext(secure_filename(storage.filename))
    name = f"{field}-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext.lower()}"
    storage.save(os.path.join(upload_dir(), name))
    log.info("imagem gravada: %s", name)
    return URL_PREFIX + name


def remove_image(image_url):
    """Apaga o arquivo de uma URL gerada por save_image (se ainda existir)."""
    if not image_url or not image_url.startswith(URL_PREFIX):
        return
    path = os.path.join(upload_dir(), secure_filename(image_url[len(URL_PREFIX):]))
    if os.path.exists(path):
        os.remove(path)
        log.info("imagem removida: %s", path)
