from __future__ import annotations

from rmp.domain.access.policy import Decision, DenialKind


class ApplicationError(Exception):
    pass


class BadRequestError(ApplicationError):
    pass


class UnauthorizedError(ApplicationError):
    pass


class ForbiddenError(ApplicationError):
    pass


class NotFoundError(ApplicationError):
    pass


class ConflictError(ApplicationError):
    pass


class InternalError(ApplicationError):
    pass


class InvalidCredentialsError(UnauthorizedError):
    pass


class AuthenticationRequiredError(UnauthorizedError):
    pass


class EmailAlreadyExistsError(ConflictError):
    pass


class MealNameConflictError(ConflictError):
    pass


_DENIAL_ERRORS: dict[DenialKind, type[ApplicationError]] = {
    DenialKind.BAD_REQUEST: BadRequestError,
    DenialKind.UNAUTHORIZED: UnauthorizedError,
    DenialKind.FORBIDDEN: ForbiddenError,
    DenialKind.NOT_FOUND: NotFoundError,
}


def error_for(decision: Decision) -> ApplicationError:
    if decision.allowed or decision.kind is None:
        raise ValueError("cannot build an error from an allowing decision")
    return _DENIAL_ERRORS[decision.kind](decision.reason)
