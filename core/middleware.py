# core/middleware.py
import logging

from django.http import JsonResponse

from .exceptions import CarsOfferError

logger = logging.getLogger(__name__)


class ApiErrorMiddleware:
    """
    Converte erros de domínio em respostas JSON com o status certo.

    Qualquer outra exceção vira um 500 opaco (detalhes só no log).
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, CarsOfferError):
            logger.warning(
                "%s on %s %s: %s",
                type(exception).__name__, request.method, request.path, exception.message,
            )
            return JsonResponse(
                exception.to_response(),
                status=exception.http_status,
                json_dumps_params={"ensure_ascii": False},
            )

        logger.error("Unhandled exception on %s %s", request.method, request.path, exc_info=exception)
        return JsonResponse(
            {
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "Internal server error",
                    "details": "An unexpected error occurred",
                }
            },
            status=500,
        )
