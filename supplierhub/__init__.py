import logging
from flask import Flask, jsonify, render_template, request
from flask_wtf import CSRFProtect
from werkzeug.exceptions import HTTPException
from .config import Config
from .db import init_db
from .errors import RecordError, ValidationFailed

csrf = CSRFProtect()
log = logging.getLogger(__name__)

def _wants_json():
    return request.path.startswith("/api/")

def _configure_logging(app):
    # handlers/formato ficam com quem executa (scripts em tools/, servidor)
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.getLogger("supplierhub").setLevel(level)

def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    # Extensões
    app.secret_key = app.config["APP_SECRET"]
    _configure_logging(app)
    csrf.init_app(app)

    # DB init & migrações
    with app.app_context():
        init_db()

    # Blueprints
    from .routes.api_suppliers import bp as bp_api_suppliers
    from .routes.api_products import bp as bp_api_products
    from .routes.api_associations import bp as bp_api_associations
    from .routes.web import bp as bp_web

    # API JSON: sem CSRF (cliente não usa sessão)
    for bp in (bp_api_suppliers, bp_api_products, bp_api_associations):
        csrf.exempt(bp)
        app.register_blueprint(bp)
    app.register_blueprint(bp_web)

    # Erros de domínio -> JSON (as rotas HTML tratam os seus com flash)
    @app.errorhandler(RecordError)
    def record_error(e):
        body = {"message": e.message}
        if isinstance(e, ValidationFailed):
            body["errors"] = e.errors
        elif e.field:
            body["errors"] = {e.field: [e.message]}
        log.warning("%s %s -> %s: %s", request.method, request.path, type(e).__name__, e.message)
        return jsonify(body), e.status

    @app.errorhandler(404)
    def not_found(e):
        if _wants_json():
            return jsonify(message="Recurso não encontrado."), 404
        return render_template("error.html", code=404, msg="Página não encontrada."), 404

    @app.errorhandler(413)
    def too_large(e):
        msg = "Arquivo maior que o limite permitido."
        if _wants_json():
            return jsonify(message=msg), 413
        return render_template("error.html", code=413, msg=msg), 413

    @app.errorhandler(500)
    def server_error(e):
        if _wants_json():
            return jsonify(message="Erro interno."), 500
        return render_template("error.html", code=500, msg="Erro interno."), 500

    @app.errorhandler(HTTPException)
    def http_error(e):
        if _wants_json():
            return jsonify(message=e.description), e.code
        return e

    log.info("supplierhub pronto (db=%s)", app.config["DB_PATH"])
    return app
