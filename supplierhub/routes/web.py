from flask import Blueprint, flash, redirect, render_template, request, send_from_directory, url_for

from ..errors import RecordError
from ..forms import CATEGORIES, AssociationForm, ProductForm, SupplierForm, form_data
from ..services import associations, products, suppliers
from ..services.uploads import remove_image, save_image, upload_dir
from ..utils_cnpj import format_cnpj, validate_cnpj

bp = Blueprint("web", __name__)

def _render(tab="fornecedor", status=200, **forms):
    forms.setdefault("supplier_form", SupplierForm(formdata=None))
    forms.setdefault("product_form", ProductForm(formdata=None))
    forms.setdefault("assoc_form", AssociationForm(formdata=None))
    return render_template(
        "index.html",
        tab=tab,
        sups=suppliers.list_suppliers(),
        prods=products.list_products(),
        assocs=associations.list_associations(),
        categories=CATEGORIES,
        cat_labels=dict(CATEGORIES),
        **forms,
    ), status

def _flash_form_errors(form):
    for field, errs in form.errors.items():
        for e in errs:
            flash(f"{getattr(form, field).label.text}: {e}", "error")

@bp.get("/")
def index():
    return _render(tab=request.args.get("tab") or "fornecedor")

# -----------------------------
# Fornecedores
# -----------------------------
@bp.post("/fornecedores/novo")
def supplier_new():
    form = SupplierForm()
    if not form.validate_on_submit():
        _flash_form_errors(form)
        return _render("fornecedor", 400, supplier_form=form)
    if not validate_cnpj(form.cnpj.data):
        form.cnpj.data = format_cnpj(form.cnpj.data)
        flash("CNPJ inválido", "error")
        return _render("fornecedor", 400, supplier_form=form)
    try:
        suppliers.create_supplier(form_data(form))
    except RecordError as e:
        flash(e.message, "error")
        return _render("fornecedor", 400, supplier_form=form)
    flash("Fornecedor cadastrado com sucesso!", "success")
    return redirect(url_for("web.index", tab="fornecedor"))

@bp.post("/fornecedores/excluir/<int:sid>")
def supplier_delete(sid):
    try:
        suppliers.delete_supplier(sid)
        flash("Fornecedor removido.", "success")
    except RecordError as e:
        flash(e.message, "error")
    return redirect(url_for("web.index", tab="fornecedor"))

# -----------------------------
# Produtos
# -----------------------------
@bp.post("/produtos/novo")
def product_new():
    form = ProductForm()
    if not form.validate_on_submit():
        _flash_form_errors(form)
        return _render("produto", 400, product_form=form)
    data = form_data(form)
    data["image_url"] = save_image(form.image.data)
    try:
        products.create_product(data)
    except RecordError as e:
        remove_image(data["image_url"])
        flash(e.message, "error")
        return _render("produto", 400, product_form=form)
    flash("Produto cadastrado com sucesso!", "success")
    return redirect(url_for("web.index", tab="produto"))

@bp.post("/produtos/excluir/<int:pid>")
def product_delete(pid):
    try:
        removed = products.delete_product(pid)
        remove_image(removed["image_url"])
        flash("Produto removido.", "success")
    except RecordError as e:
        flash(e.message, "error")
    return redirect(url_for("web.index", tab="produto"))

# -----------------------------
# Associações
# -----------------------------
@bp.post("/associacoes/nova")
def association_new():
    form = AssociationForm()
    if not form.validate_on_submit():
        _flash_form_errors(form)
        return _render("associacao", 400, assoc_form=form)
    try:
        associations.create_association(form.supplier_id.data, form.product_id.data)
    except RecordError as e:
        flash(e.message, "error")
        return _render("associacao", 400, assoc_form=form)
    flash("Associação realizada com sucesso!", "success")
    return redirect(url_for("web.index", tab="associacao"))

@bp.post("/associacoes/excluir/<int:sid>/<int:pid>")
def association_delete(sid, pid):
    try:
        associations.delete_association(sid, pid)
        flash("Associação removida com sucesso!", "success")
    except RecordError as e:
        flash(e.message, "error")
    return redirect(url_for("web.index", tab="associacao"))

# -----------------------------
# Arquivos enviados
# -----------------------------
@bp.get("/uploads/<path:filename>")
def uploaded(filename):
    return send_from_directory(upload_dir(), filename)
