"""
Domain exceptions for the RigAsset business layer

These exceptions represent business rule violations and are raised to the
caller unchanged. The API layer translates them into HTTP responses.
"""


class RigAssetDomainError(Exception):
    """Base exception for all domain errors"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RigAssetDomainError):
    """Raised when a required field is missing or malformed"""
    status_code = 400


class NotFoundError(RigAssetDomainError):
    """Raised when a referenced asset, transfer or schedule does not exist"""
    status_code = 404


class ConflictError(RigAssetDomainError):
    """Raised when an operation targets a record that is not in the required state"""
    status_code = 409


class PersistenceError(RigAssetDomainError):
    """Raised when an atomic unit could not commit; no partial effects remain"""
    status_code = 500
