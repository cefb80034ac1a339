# core/exceptions.py
"""
Erros de domínio do carsoffer.

Todos são resultados esperados, que o chamador consegue tratar, e cada um
tem um tipo próprio (nada de string genérica). Qualquer outra falha (banco
fora do ar, erro de I/O) não passa por aqui: sobe como está e vira um 500
opaco no middleware.
"""
from typing import Any, Dict, Optional


class CarsOfferError(Exception):
    """Base de todos os erros de domínio."""

    code = "ERROR"
    http_status = 500
    title = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> Dict[str, Any]:
        return {}

    def to_response(self) -> Dict[str, Any]:
        body = {"code": self.code, "message": self.title, "details": self.message}
        body.update(self.details())
        return {"error": body}


class NotFound(CarsOfferError):
    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, entity: str, id: Any):
        super().__init__(f"{entity} with ID {id} not found")
        self.entity = entity
        self.id = id

    @property
    def title(self) -> str:
        return f"{self.entity} not found"

    def details(self) -> Dict[str, Any]:
        return {"entity": self.entity, "id": self.id}


class DuplicateKey(CarsOfferError):
    code = "DUPLICATE_KEY"
    http_status = 409
    title = "Conflict"

    def __init__(self, value: str):
        super().__init__(f"Car with VIN already exists: {value}")
        self.value = value


class InvalidArgument(CarsOfferError):
    code = "INVALID_ARGUMENT"
    http_status = 400
    title = "Invalid argument"

    def __init__(self, reason: str, errors: Optional[Dict[str, Any]] = None):
        super().__init__(reason)
        self.reason = reason
        self.errors = errors or {}

    def details(self) -> Dict[str, Any]:
        return {"errors": self.errors} if self.errors else {}


class InvalidSortField(CarsOfferError):
    code = "INVALID_SORT_FIELD"
    http_status = 400
    title = "Invalid sort field"

    def __init__(self, field: str, allowed=()):
        allowed = tuple(sorted(allowed))
        message = f"Cannot sort by '{field}'."
        if allowed:
            message += f" Allowed fields: {', '.join(allowed)}"
        super().__init__(message)
        self.field = field
        self.allowed = allowed


class ConflictingUpdate(CarsOfferError):
    """Perda de corrida na checagem otimista de versão."""

    code = "CONFLICTING_UPDATE"
    http_status = 409
    title = "Conflict"

    def __init__(self, entity: str, id: Any):
        super().__init__(f"{entity} with ID {id} was modified concurrently")
        self.entity = entity
        self.id = id
