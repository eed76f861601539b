import enum
import functools
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    """What went wrong, so callers can pick a response without catching subclasses.

    - INVALID_INPUT: malformed or out-of-range data, or a uniqueness conflict
    - NOT_FOUND: a referenced user or todo does not exist
    - STORE_FAILURE: the database failed during an otherwise valid operation
    """

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    STORE_FAILURE = "store_failure"


class ServiceError(Exception):
    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @classmethod
    def invalid(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.INVALID_INPUT, message)

    @classmethod
    def not_found(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.NOT_FOUND, message)

    def __repr__(self) -> str:
        return f"ServiceError(kind={self.kind.value!r}, message={self.message!r})"


def service_operation(failure_message: str, *, conflict_message: str = "Data integrity constraint violated"):
    """
    Wrap an async service method ``(self, db, ...)`` at its operation boundary.

    - logs start / success / failure once per call
    - ServiceError passes through untouched
    - IntegrityError (a unique or foreign key constraint caught at write time)
      is rolled back and raised as INVALID_INPUT with ``conflict_message``
    - any other SQLAlchemyError is rolled back and raised as STORE_FAILURE
      with ``failure_message``; the original error is kept as ``__cause__``
    """

    def decorator(func):
        operation = func.__qualname__

        @functools.wraps(func)
        async def wrapper(self, db, *args, **kwargs):
            logger.debug("%s started", operation, extra={"operation": operation})
            try:
                result = await func(self, db, *args, **kwargs)
            except ServiceError as exc:
                logger.warning(
                    "%s rejected [%s]: %s", operation, exc.kind.value, exc.message,
                    extra={"operation": operation, "error_kind": exc.kind.value},
                )
                raise
            except IntegrityError as exc:
                await db.rollback()
                logger.warning(
                    "%s hit a constraint violation: %s", operation, exc.orig,
                    extra={"operation": operation, "error_kind": ErrorKind.INVALID_INPUT.value},
                )
                raise ServiceError.invalid(conflict_message) from exc
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.exception(
                    "%s failed: %s", operation, failure_message,
                    extra={"operation": operation, "error_kind": ErrorKind.STORE_FAILURE.value},
                )
                raise ServiceError(ErrorKind.STORE_FAILURE, failure_message) from exc
            logger.info("%s succeeded", operation, extra={"operation": operation})
            return result

        return wrapper

    return decorator
