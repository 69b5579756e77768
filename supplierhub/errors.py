"""Erros de domínio do cadastro.

Os serviços só classificam; a camada HTTP decide status e formato da
resposta (ver o errorhandler em ``create_app``).
"""


class RecordError(Exception):
    status = 400
    default_message = "Operação inválida."

    def __init__(self, message=None, field=None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)


class InvalidIdentifier(RecordError):
    default_message = "CNPJ inválido"


class DuplicateIdentifier(RecordError):
    default_message = "Identificador já cadastrado."


class DuplicateAssociation(RecordError):
    default_message = "Fornecedor já está associado a este produto!"


class NotFound(RecordError):
    status = 404
    default_message = "Registro não encontrado."


class ValidationFailed(RecordError):
    default_message = "Dados inválidos"

    def __init__(self, errors, message=None):
        super().__init__(message)
        self.errors = errors
