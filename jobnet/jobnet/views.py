"""JSON replacements for Django's default HTML error pages."""
from .errors import NotFoundError, UnexpectedError
from .middleware import error_response


def not_found(request, exception=None):
    return error_response(NotFoundError())


def server_error(request):
    return error_response(UnexpectedError())
