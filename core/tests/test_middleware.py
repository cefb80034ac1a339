import json

from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase

from core.exceptions import ConflictingUpdate, DuplicateKey, InvalidArgument, InvalidSortField, NotFound
from core.middleware import ApiErrorMiddleware


class ApiErrorMiddlewareTests(SimpleTestCase):
    """
    Cada erro de domínio vira JSON com o status HTTP correspondente.
    """

    def setUp(self):
        self.middleware = ApiErrorMiddleware(lambda request: HttpResponse("ok"))
        self.request = RequestFactory().get("/cars/1/")

    def render(self, exc):
        with self.assertLogs("core.middleware"):
            response = self.middleware.process_exception(self.request, exc)
        return response.status_code, json.loads(response.content)["error"]

    def test_not_found(self):
        status, body = self.render(NotFound("Vehicle", 99))
        self.assertEqual(status, 404)
        self.assertEqual(body["code"], "NOT_FOUND")
        self.assertEqual(body["message"], "Vehicle not found")
        self.assertEqual(body["details"], "Vehicle with ID 99 not found")
        self.assertEqual((body["entity"], body["id"]), ("Vehicle", 99))

    def test_statuses(self):
        cases = (
            (DuplicateKey("VIN123"), 409, "DUPLICATE_KEY"),
            (InvalidArgument("Brand or model must be provided."), 400, "INVALID_ARGUMENT"),
            (InvalidSortField("mileage", ("id",)), 400, "INVALID_SORT_FIELD"),
            (ConflictingUpdate("Offer", 3), 409, "CONFLICTING_UPDATE"),
        )
        for exc, expected_status, code in cases:
            status, body = self.render(exc)
            self.assertEqual(status, expected_status)
            self.assertEqual(body["code"], code)
            self.assertEqual(body["details"], exc.message)

    def test_validation_errors_are_listed(self):
        status, body = self.render(InvalidArgument("Validation failed.", errors={"year": ["too old"]}))
        self.assertEqual(status, 400)
        self.assertEqual(body["errors"], {"year": ["too old"]})

    def test_unexpected_error_is_opaque(self):
        status, body = self.render(RuntimeError("database password is hunter2"))
        self.assertEqual(status, 500)
        self.assertEqual(body["code"], "INTERNAL_ERROR")
        self.assertNotIn("hunter2", json.dumps(body))

    def test_passes_through_responses(self):
        self.assertEqual(self.middleware(self.request).content, b"ok")
