from flask import request
from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField
from werkzeug.datastructures import ImmutableMultiDict
from wtforms import DateField, IntegerField, StringField, TextAreaField
from wtforms.validators import DataRequired, Email, Length, NumberRange, Optional

from .services.uploads import IMAGE_EXTENSIONS

# value -> rótulo exibido no formulário de produto
CATEGORIES = [
    ("electronics", "Eletrônicos"),
    ("food", "Alimentos"),
    ("clothing", "Vestuário"),
    ("home", "Casa e Jardim"),
    ("health", "Saúde e Beleza"),
    ("sports", "Esportes"),
    ("books", "Livros"),
    ("toys", "Brinquedos"),
    ("other", "Outro"),
]

_strip = [lambda s: s.strip() if isinstance(s, str) else s]


class SupplierForm(FlaskForm):
    # cnpj: só obrigatório aqui; dígitos verificadores são checados no serviço (InvalidIdentifier)
    company_name = StringField("Nome da Empresa", filters=_strip,
                               validators=[DataRequired("Nome da empresa é obrigatório")])
    cnpj = StringField("CNPJ", filters=_strip,
                       validators=[DataRequired("CNPJ é obrigatório"), Length(max=18)])
    address = TextAreaField("Endereço", filters=_strip,
                            validators=[DataRequired("Endereço é obrigatório")])
    phone = StringField("Telefone", filters=_strip,
                        validators=[DataRequired("Telefone é obrigatório"), Length(max=15)])
    email = StringField("E-mail", filters=_strip,
                        validators=[DataRequired("E-mail é obrigatório"), Email("E-mail inválido")])
    contact_person = StringField("Contato Principal", filters=_strip,
                                 validators=[DataRequired("Nome do contato é obrigatório")])


class ProductForm(FlaskForm):
    name = StringField("Nome do Produto", filters=_strip,
                       validators=[DataRequired("Nome do produto é obrigatório")])
    barcode = StringField("Código de Barras", filters=_strip,
                          validators=[Optional(), Length(max=50)])
    description = TextAreaField("Descrição", filters=_strip,
                                validators=[DataRequired("Descrição é obrigatória")])
    quantity = IntegerField("Quantidade", default=0, validators=[
        Optional(), NumberRange(min=0, message="Quantidade deve ser maior ou igual a 0")])
    category = StringField("Categoria", filters=_strip,
                           validators=[DataRequired("Categoria é obrigatória")])
    expiration_date = DateField("Data de Validade",
                                format=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%S"],
                                validators=[Optional()])
    image = FileField("Imagem", validators=[
        FileAllowed(IMAGE_EXTENSIONS, "Apenas arquivos de imagem são permitidos!")])


class AssociationForm(FlaskForm):
    supplier_id = IntegerField("Fornecedor", validators=[
        DataRequired("Fornecedor é obrigatório"), NumberRange(min=1)])
    product_id = IntegerField("Produto", validators=[
        DataRequired("Produto é obrigatório"), NumberRange(min=1)])


def submitted_keys():
    if request.is_json:
        payload = request.get_json(silent=True)
        return set(payload) if isinstance(payload, dict) else set()
    return set(request.form.keys()) | set(request.files.keys())


def partial(form):
    """Remove do form os campos não enviados (PUT = troca parcial)."""
    keys = submitted_keys()
    for name in list(form._fields):
        if name != "csrf_token" and name not in keys:
            delattr(form, name)
    return form


def form_data(form, skip=("csrf_token", "image")):
    return {name: f.data for name, f in form._fields.items() if name not in skip}


def api_form(form_cls, **kwargs):
    """Instancia o form para a API JSON/multipart: sem CSRF, valores JSON viram texto
    como num POST de formulário (null -> "")."""
    kwargs.setdefault("meta", {"csrf": False})
    if request.is_json:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}
        kwargs["formdata"] = ImmutableMultiDict(
            {k: "" if v is None else str(v) for k, v in payload.items()})
    return form_cls(**kwargs)
