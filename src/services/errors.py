from __future__ import annotations


class ServiceError(Exception):
    pass


class StoreError(ServiceError):
    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation


class DocumentNotFoundError(StoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"Documento não encontrado: {collection}/{doc_id}", operation="update")
        self.collection = collection
        self.doc_id = doc_id


class RecipeNotFoundError(LookupError):
    """Raised when a recipe id does not exist in the store."""


class RecipePermissionError(PermissionError):
    """Raised when the caller does not own the recipe."""


class RegistrationError(ValueError):
    pass


class MissingProfileFieldsError(RegistrationError):
    def __init__(self, message: str = "Email e username são obrigatórios"):
        super().__init__(message)


class UserAlreadyRegisteredError(RegistrationError):
    def __init__(self, user_id: str):
        super().__init__("Usuário já cadastrado")
        self.user_id = user_id
