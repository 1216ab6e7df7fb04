# Overview: Use-case and role decorators wrapping every externally visible operation.

from functools import wraps

from .observability import app_logger, get_observer
from .persistence import UnitOfWork
from .responses import BaseResponse, ErrorCode
from .services.authorization import Action, AuthorizationError, decide
from .validation import ValidationError


def use_case(name: str, activity: str):
    """
    Run a service function as a use case.

    The wrapped function is called as fn(identity, *args, uow=uow, **kwargs)
    and must return a BaseResponse.

    - uow: pass one in to share it (e.g., a test or a batch); otherwise a
      fresh UnitOfWork is opened and always disposed afterwards
    - observer: defaults to app.extensions["orderhub.observer"]

    SECURITY: unexpected exceptions are logged in full but reported as a
    generic "An error occurred while <activity>" 500 envelope, so internal
    details never reach the caller. AuthorizationError and ValidationError
    become 401/403 and 400 envelopes.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(identity, *args, uow=None, observer=None, **kwargs):
            observer = observer or get_observer()
            observer.on_start(name, identity)

            try:
                if uow is None:
                    with UnitOfWork() as owned:
                        response = fn(identity, *args, uow=owned, **kwargs)
                else:
                    response = fn(identity, *args, uow=uow, **kwargs)
            except AuthorizationError as e:
                response = BaseResponse.error(e.message, e.error_code)
            except ValidationError as e:
                response = BaseResponse.error(str(e), ErrorCode.VALIDATION_FAILED)
            except Exception as e:
                app_logger().exception("Failed to run %s", name)
                observer.on_failure(name, identity, exc=e)
                return BaseResponse.error(f"An error occurred while {activity}", ErrorCode.INTERNAL)

            if response.ok:
                observer.on_success(name, identity, response)
            else:
                observer.on_failure(name, identity, response=response)
            return response

        wrapper.use_case_name = name
        return wrapper
    return decorator


def require_roles(*roles):
    """
    Role gate. Place under @use_case so the rejection is observed and reported as an envelope.

    401 when there is no valid identity, 403 when the caller's role is not listed.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(identity, *args, **kwargs):
            decision = decide(identity, Action.READ)
            if not decision:
                return BaseResponse.error(decision.reason, decision.error_code)
            if identity.role not in roles:
                return BaseResponse.error("You do not have permission to perform this action", ErrorCode.FORBIDDEN)
            return fn(identity, *args, **kwargs)
        return wrapper
    return decorator
