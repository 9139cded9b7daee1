"""
Erros de domínio do funil de captação.
"""


class ValidationError(ValueError):
    """Campos obrigatórios do formulário ausentes. Nunca chega a ser persistido."""

    def __init__(self, message: str, missing_fields=None) -> None:
        super().__init__(message)
        self.missing_fields = list(missing_fields or [])


class PersistenceError(RuntimeError):
    """Falha ao inserir, listar ou eliminar registros no banco."""
