from flask import Blueprint, jsonify

from ..errors import NotFound, ValidationFailed
from ..forms import ProductForm, api_form, form_data, partial
from ..services import products as svc
from ..services.uploads import remove_image, save_image

bp = Blueprint("api_products", __name__, url_prefix="/api/products")

@bp.get("")
def list_all():
    return jsonify(svc.list_products())

@bp.get("/<int:pid>")
def get_one(pid):
    p = svc.get_product(pid)
    if not p:
        raise NotFound("Produto não encontrado.")
    return jsonify(p)

@bp.post("")
def create():
    form = api_form(ProductForm)
    if not form.validate():
        raise ValidationFailed(form.errors)
    data = form_data(form)
    data["image_url"] = save_image(form.image.data)
    try:
        return jsonify(svc.create_product(data)), 201
    except Exception:
        remove_image(data["image_url"])
        raise

@bp.put("/<int:pid>")
def update(pid):
    form = partial(api_form(ProductForm))
    if not form.validate():
        raise ValidationFailed(form.errors)
    # campos vazios não sobrescrevem (quantidade/validade em branco = sem mudança)
    data = {k: v for k, v in form_data(form).items()
            if not (k in ("quantity", "expiration_date") and v is None)}
    old = svc.get_product(pid)
    if not old:
        raise NotFound("Produto não encontrado.")
    if form.image is not None and form.image.data:
        data["image_url"] = save_image(form.image.data)
    try:
        p = svc.update_product(pid, data)
    except Exception:
        remove_image(data.get("image_url"))
        raise
    if "image_url" in data:
        remove_image(old["image_url"])
    return jsonify(p)

@bp.delete("/<int:pid>")
def delete(pid):
    removed = svc.delete_product(pid)
    remove_image(removed["image_url"])
    return "", 204
