class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    error_kind: str = 'InternalError'

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    error_kind = 'DomainError'

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class InvalidArgumentError(DomainError):
    error_kind = 'InvalidArgument'


class InsufficientCapacityError(DomainError):
    error_kind = 'InsufficientCapacity'


class InvalidTransitionError(DomainError):
    error_kind = 'InvalidTransition'


class NotFoundError(CustomBaseError):
    error_kind = 'NotFound'

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class StoreUnavailableError(CustomBaseError):
    """Transient backing-store failure (connection lost, timeout, pool exhausted)."""

    error_kind = 'StoreUnavailable'

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


class ConcurrentModificationError(CustomBaseError):
    """A compare-and-set lost against a concurrent writer; the caller may re-read and retry."""

    error_kind = 'ConcurrentModification'

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)
