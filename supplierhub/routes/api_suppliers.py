from flask import Blueprint, jsonify

from ..errors import NotFound, ValidationFailed
from ..forms import SupplierForm, api_form, form_data, partial
from ..services import suppliers as svc

bp = Blueprint("api_suppliers", __name__, url_prefix="/api/suppliers")

@bp.get("")
def list_all():
    return jsonify(svc.list_suppliers())

@bp.get("/<int:sid>")
def get_one(sid):
    s = svc.get_supplier(sid)
    if not s:
        raise NotFound("Fornecedor não encontrado.")
    return jsonify(s)

@bp.post("")
def create():
    form = api_form(SupplierForm)
    if not form.validate():
        raise ValidationFailed(form.errors)
    return jsonify(svc.create_supplier(form_data(form))), 201

@bp.put("/<int:sid>")
def update(sid):
    form = partial(api_form(SupplierForm))
    if not form.validate():
        raise ValidationFailed(form.errors)
    return jsonify(svc.update_supplier(sid, form_data(form)))

@bp.delete("/<int:sid>")
def delete(sid):
    svc.delete_supplier(sid)
    return "", 204
