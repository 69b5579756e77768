# supplierhub/utils_cnpj.py
import re

from .errors import InvalidIdentifier

_CNPJ_RE = re.compile(r"(\d{2})(\d{3})(\d{3})(\d{4})(\d{2})", re.ASCII)
_PHONE_FIXO_RE = re.compile(r"(\d{2})(\d{4})(\d{4})", re.ASCII)
_PHONE_CEL_RE = re.compile(r"(\d{2})(\d{5})(\d{4})", re.ASCII)

def only_digits(s: str) -> str:
    # só 0-9: \D aceitaria dígitos unicode (fullwidth, arábicos...)
    return re.sub(r"[^0-9]+", "", s or "")

def format_cnpj(value: str) -> str:
    """
    Formata para exibição: NN.NNN.NNN/NNNN-NN.
    Mais de 14 dígitos -> devolve só os dígitos (sem truncar). Nunca rejeita.
    """
    d = only_digits(value)
    if len(d) <= 14:
        return _CNPJ_RE.sub(r"\1.\2.\3/\4-\5", d, count=1)
    return d

def format_phone(value: str) -> str:
    """
    Até 10 dígitos -> (NN) NNNN-NNNN (fixo); acima -> (NN) NNNNN-NNNN (celular).
    Não valida a quantidade de dígitos.
    """
    d = only_digits(value)
    if len(d) <= 10:
        return _PHONE_FIXO_RE.sub(r"(\1) \2-\3", d, count=1)
    return _PHONE_CEL_RE.sub(r"(\1) \2-\3", d, count=1)

def calc_cnpj_check(prefix: str) -> int:
    """
    Calcula o dígito verificador (módulo 11) para 12 dígitos (1º DV)
    ou 13 dígitos (2º DV). Pesos começam em 5 ou 6 e voltam de 2 para 9.
    """
    if not re.fullmatch(r"[0-9]{12,13}", prefix or ""):
        raise ValueError("Para calcular o DV, informe 12 ou 13 dígitos.")
    weight = len(prefix) - 7
    soma = 0
    for ch in prefix:
        soma += int(ch) * weight
        weight = 9 if weight == 2 else weight - 1
    resto = soma % 11
    return 0 if resto < 2 else 11 - resto

def validate_cnpj(value: str) -> bool:
    d = only_digits(value)
    if len(d) != 14:
        return False
    # 00.000.000/0000-00, 11.111.111/1111-11 ...
    if d == d[0] * 14:
        return False
    if calc_cnpj_check(d[:12]) != int(d[12]):
        return False
    if calc_cnpj_check(d[:13]) != int(d[13]):
        return False
    return True

def normalize_cnpj(value: str) -> str:
    """
    Retorna o CNPJ na forma canônica (18 caracteres, pontuado).
    Lança InvalidIdentifier se não passar na validação.
    """
    if not validate_cnpj(value):
        raise InvalidIdentifier("CNPJ inválido", field="cnpj")
    return format_cnpj(value)
