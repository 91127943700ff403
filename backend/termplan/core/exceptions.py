class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ResourceNotFoundError(AppError):
    """Raised when a requested record is not in the department's partition."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )

class DepartmentMismatchError(AppError):
    """Raised when a write would cross a department partition."""
    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"Record belongs to department {actual}, not {expected}",
            status_code=409,
            details={"expected": expected, "actual": actual},
        )

class WorkflowError(AppError):
    """Raised when an approval transition is not legal from the current state."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class StoreError(AppError):
    """Raised when the document store rejects or cannot complete a write."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=503, details=details)

class AssistantUnavailableError(AppError):
    """Raised when the text-completion collaborator cannot be reached."""
    def __init__(self, message: str):
        super().__init__(message, status_code=502)
