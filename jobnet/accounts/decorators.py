from functools import wraps

from jobnet.errors import AuthenticationError, ForbiddenError
from .models import User


def get_actor(request) -> User:
    """Return the authenticated user or raise a 401."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        raise AuthenticationError("Access token required")
    return user


def get_viewer(request) -> User | None:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return user


def login_required_json(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        get_actor(request)
        return view_func(request, *args, **kwargs)
    return _wrapped


def account_type_required(account_type: str):
    """Ensure the logged-in user has the given account type."""
    def decorator(view_func):
        @login_required_json
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if request.user.account_type != account_type:
                raise ForbiddenError(f"Only {account_type} accounts can do this")
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


candidate_required = account_type_required(User.AccountType.CANDIDATE)
company_required = account_type_required(User.AccountType.COMPANY)
