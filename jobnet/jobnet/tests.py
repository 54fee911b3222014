from unittest import mock

from django.test import TestCase
from django.urls import reverse

from .errors import NotFoundError, UnexpectedError
from .middleware import error_response


class ErrorResponseTests(TestCase):
    def test_unknown_path_returns_json_404(self):
        resp = self.client.get("/no-such-path/")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp["Content-Type"], "application/json")
        self.assertEqual(resp.json(), {"message": "Not found", "code": "NOT_FOUND"})

    def test_unexpected_exception_returns_generic_500(self):
        with mock.patch("posts.services.feed", side_effect=RuntimeError("db exploded")):
            with self.assertLogs("jobnet.middleware", level="ERROR"):
                resp = self.client.get(reverse("posts"))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"message": "Server error", "code": "SERVER_ERROR"})
        self.assertNotIn("exploded", resp.content.decode())

    def test_error_response_body(self):
        resp = error_response(UnexpectedError())
        self.assertEqual(resp.status_code, 500)

        resp = error_response(NotFoundError("Post not found", detail={"post_id": ["missing"]}))
        self.assertEqual(resp.status_code, 404)
        self.assertIn(b'"errors"', resp.content)
