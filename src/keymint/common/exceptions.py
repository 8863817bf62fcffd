"""Keymint exception hierarchy."""


class KeymintError(Exception):
    """Base exception for all Keymint errors."""

    def __init__(self, message: str = "", code: str = "KEYMINT_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class AuthDeniedError(KeymintError):
    """Raised when a principal is not (or cannot be confirmed as) an administrator."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, code="ACCESS_DENIED")


class InvalidCredentialsError(KeymintError):
    """Raised when an email/password sign-in fails."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class StoreUnavailableError(KeymintError):
    """Raised when the license store cannot complete a read or write."""

    def __init__(self, message: str = "License store unavailable"):
        super().__init__(message, code="STORE_UNAVAILABLE")


class UniquenessViolationError(StoreUnavailableError):
    """Raised when a batch collides with keys already in the store."""

    def __init__(self, message: str = "Generated key collided with an existing key"):
        KeymintError.__init__(self, message, code="UNIQUENESS_VIOLATION")


class InvalidBatchSizeError(KeymintError):
    """Raised when a requested batch size is outside the allowed range."""

    def __init__(self, message: str = "Invalid batch size"):
        super().__init__(message, code="INVALID_COUNT")


class OperatorExistsError(KeymintError):
    """Raised when registering an operator whose email is taken."""

    def __init__(self, message: str = "Operator already exists"):
        super().__init__(message, code="OPERATOR_EXISTS")


class OperatorNotFoundError(KeymintError):
    """Raised when an operator cannot be found by email."""

    def __init__(self, message: str = "Operator not found"):
        super().__init__(message, code="NOT_FOUND")
