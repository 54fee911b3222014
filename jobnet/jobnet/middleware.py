import logging

from django.http import Http404, JsonResponse

from .errors import JobnetError, NotFoundError, UnexpectedError

logger = logging.getLogger(__name__)


def error_response(exc: JobnetError) -> JsonResponse:
    payload = {"message": exc.message, "code": exc.code}
    if exc.detail:
        payload["errors"] = exc.detail
    return JsonResponse(payload, status=exc.status_code)


class ApiErrorMiddleware:
    """Render exceptions escaping a view as JSON error bodies.

    Server errors never leak internals to the caller; they are logged here.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, JobnetError):
            if exception.status_code >= 500:
                logger.error("Request failed: path=%s code=%s", request.path, exception.code, exc_info=exception)
            else:
                logger.warning(
                    "Request rejected: path=%s status=%s code=%s message=%s",
                    request.path,
                    exception.status_code,
                    exception.code,
                    exception.message,
                )
            return error_response(exception)

        if isinstance(exception, Http404):
            return error_response(NotFoundError())

        logger.error("Unexpected error: path=%s", request.path, exc_info=exception)
        return error_response(UnexpectedError())
