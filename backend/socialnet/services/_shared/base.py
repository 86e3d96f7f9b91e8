from __future__ import annotations

from collections.abc import Callable

from socialnet.core import errors as api_errors
from socialnet.services._shared.errors import (
    AuthErrorKind,
    AuthenticationError,
    ConflictError,
    DuplicateEmailError,
    DuplicateUsernameError,
    NotFoundError,
    ServiceError,
)
from socialnet.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

UowFactory = Callable[[], SQLAlchemyUnitOfWork]
RoUowFactory = Callable[[], SQLAlchemyReadOnlyUnitOfWork]


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services never touch the global session; they go through the injected
      Unit of Work factories.
    """

    def __init__(
        self,
        *,
        uow_factory: UowFactory = SQLAlchemyUnitOfWork,
        ro_uow_factory: RoUowFactory = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        """
        Initialize the base service.

        :param uow_factory: Zero-arg callable returning a read-write UoW.
        :type uow_factory: Callable[[], SQLAlchemyUnitOfWork]
        :param ro_uow_factory: Zero-arg callable returning a read-only UoW.
        :type ro_uow_factory: Callable[[], SQLAlchemyReadOnlyUnitOfWork]
        """
        self._uow_factory = uow_factory
        self._ro_uow_factory = ro_uow_factory

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :rtype: SQLAlchemyUnitOfWork
        """
        return self._uow_factory()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return self._ro_uow_factory()

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, NotFoundError):
            # → 404 Not Found
            return api_errors.NotFound(str(exc))

        if isinstance(exc, DuplicateEmailError | DuplicateUsernameError):
            # → 409 Conflict, code mirrors the error kind
            return api_errors.Conflict(exc.detail, code=exc.kind.value)

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))

        if isinstance(exc, AuthenticationError):
            # → 401 Unauthorized
            kind = getattr(exc, "kind", None)
            code = kind.value if isinstance(kind, AuthErrorKind) else "unauthorized"
            return api_errors.Unauthorized(str(exc), code=code)

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=400,
                code="bad_request",
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc

    # --------------------------- AuthZ --------------------------------

    def ensure_owner(self, actor_id: int | None, owner_id: int, *, entity: str = "User") -> None:
        """
        Ensure the current actor owns the resource.

        Foreign resources are reported as missing rather than forbidden so
        their existence is not disclosed.

        :param actor_id: Authenticated user id.
        :param owner_id: Expected owner id.
        :param entity: Entity name used in the error.
        :raises NotFoundError: If actor is not the owner.
        """
        if actor_id is None or actor_id != owner_id:
            raise NotFoundError(entity, owner_id)
