import unittest

from rest_framework import status

from apps.api.utils import error_response


class ErrorResponseTests(unittest.TestCase):
    def test_default_status_mapping_and_details(self):
        resp = error_response("NOT_FOUND", "Order not found", {"id": "1"})
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(
            resp.data,
            {"error": {"code": "NOT_FOUND", "message": "Order not found", "status": 404, "details": {"id": "1"}}},
        )

    def test_explicit_status_wins_over_mapping(self):
        resp = error_response("conflict", "stale", http_status=status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["error"]["code"], "CONFLICT")

    def test_unknown_code_defaults_to_bad_request(self):
        self.assertEqual(error_response("SOMETHING_ELSE", "nope").status_code, 400)

    def test_upstream_error_maps_to_bad_gateway(self):
        resp = error_response("UPSTREAM_ERROR", "provider down")
        self.assertEqual(resp.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertNotIn("details", resp.data["error"])

    def test_headers_are_passed_through(self):
        resp = error_response("UNAUTHORIZED", "Authentication required", headers={"WWW-Authenticate": "Bearer"})
        self.assertEqual(resp["WWW-Authenticate"], "Bearer")

    def test_blank_message_is_rejected(self):
        with self.assertRaises(ValueError):
            error_response("NOT_FOUND", "  ")
