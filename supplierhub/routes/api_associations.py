from flask import Blueprint, jsonify

from ..errors import ValidationFailed
from ..forms import AssociationForm, api_form
from ..services import associations as svc

bp = Blueprint("api_associations", __name__, url_prefix="/api/associations")

@bp.get("")
def list_all():
    return jsonify(svc.list_associations())

@bp.get("/product/<int:pid>")
def by_product(pid):
    return jsonify(svc.list_by_product(pid))

@bp.get("/supplier/<int:sid>")
def by_supplier(sid):
    return jsonify(svc.list_by_supplier(sid))

@bp.post("")
def create():
    form = api_form(AssociationForm)
    if not form.validate():
        raise ValidationFailed(form.errors)
    return jsonify(svc.create_association(form.supplier_id.data, form.product_id.data)), 201

@bp.delete("/<int:sid>/<int:pid>")
def delete(sid, pid):
    svc.delete_association(sid, pid)
    return "", 204
