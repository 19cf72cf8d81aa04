class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    error_code = 'error'

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    error_code = 'invalid_request'

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class UnauthorizedError(CustomBaseError):
    error_code = 'unauthorized'

    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class ForbiddenError(CustomBaseError):
    error_code = 'forbidden'

    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    error_code = 'not_found'

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    error_code = 'conflict'

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class NotActiveError(ConflictError):
    """Event exists but is not accepting registrations"""

    error_code = 'event_not_active'

    def __init__(self, message: str = 'Event is not accepting registrations') -> None:
        super().__init__(message)


class InsufficientCapacityError(ConflictError):
    """Capacity exhausted - carries the remaining count so callers can offer less"""

    error_code = 'event_full'

    def __init__(self, remaining: int, message: str | None = None) -> None:
        self.remaining = remaining
        if message is None:
            message = 'Event is full' if remaining <= 0 else f'Only {remaining} spots remaining'
        super().__init__(message)


class DuplicateRegistrationError(ConflictError):
    error_code = 'duplicate_registration'

    def __init__(self, message: str = 'You have already registered for this event') -> None:
        super().__init__(message)


class InvalidTransitionError(ConflictError):
    error_code = 'invalid_transition'


class ReferenceCollisionError(ConflictError):
    """Raised by booking stores when a generated reference already exists"""

    error_code = 'reference_collision'


class StorageConflictError(CustomBaseError):
    """Transient contention on the backing store - retried by the ledger"""

    error_code = 'storage_conflict'

    def __init__(self, message: str = 'Storage is busy, please retry') -> None:
        super().__init__(message, 503)


class DownstreamFailureError(CustomBaseError):
    """Notification or export collaborator failed - logged, never returned to callers"""

    error_code = 'downstream_failure'

    def __init__(self, message: str) -> None:
        super().__init__(message, 502)
