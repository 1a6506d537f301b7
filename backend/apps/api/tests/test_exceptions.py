import pytest
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIRequestFactory

from apps.api.exceptions import (
    ApplicationError,
    ConflictError,
    ForbiddenError,
    InvalidOperationError,
    NotFoundError,
    UnauthorizedError,
    UnsupportedError,
    UpstreamError,
    global_exception_handler,
)

factory = APIRequestFactory()


class DummyView:
    pass


def _context(request):
    return {"request": request, "view": DummyView()}


def test_application_error_returns_structured_response():
    request = factory.get("/api/example/")
    exc = ApplicationError(
        "CONFLICT",
        "Cart already exists",
        status_code=status.HTTP_409_CONFLICT,
        details={"cartId": "abc123"},
    )
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_409_CONFLICT
    assert payload["code"] == "CONFLICT"
    assert payload["message"] == "Cart already exists"
    assert payload["details"] == {"cartId": "abc123"}


def test_validation_error_preserves_details():
    request = factory.post("/api/example/", data={})
    exc = ValidationError({"field": ["This field is required."]})
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["message"] == "Validation failed"
    assert payload["details"] == {"field": ["This field is required."]}


def test_unhandled_exception_returns_generic_message():
    request = factory.get("/api/example/")
    response = global_exception_handler(RuntimeError("boom"), _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert payload["code"] == "SERVER_ERROR"
    assert payload["message"] == "Something went wrong"
    assert "details" not in payload



def test_subclass_uses_default_code_and_status():
    request = factory.get("/api/orders/7/")
    exc = NotFoundError("Order not found", details={"id": "7"})
    response = global_exception_handler(exc, _context(request))
    payload = response.data["error"]
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert payload["code"] == "NOT_FOUND"
    assert payload["message"] == "Order not found"
    assert payload["details"] == {"id": "7"}


@pytest.mark.parametrize(
    "exc_cls, code, http_status",
    [
        (InvalidOperationError, "INVALID_OPERATION", status.HTTP_400_BAD_REQUEST),
        (UnsupportedError, "UNSUPPORTED", status.HTTP_400_BAD_REQUEST),
        (ConflictError, "CONFLICT", status.HTTP_409_CONFLICT),
        (UnauthorizedError, "UNAUTHORIZED", status.HTTP_401_UNAUTHORIZED),
        (ForbiddenError, "FORBIDDEN", status.HTTP_403_FORBIDDEN),
        (UpstreamError, "UPSTREAM_ERROR", status.HTTP_502_BAD_GATEWAY),
    ],
)
def test_domain_errors_map_to_http_status(exc_cls, code, http_status):
    request = factory.post("/api/payments/")
    response = global_exception_handler(exc_cls("failed"), _context(request))
    assert response.status_code == http_status
    assert response.data["error"]["code"] == code
    assert response.data["error"]["message"] == "failed"


def test_upstream_error_keeps_its_message():
    request = factory.post("/api/payments/1/confirm/")
    try:
        raise UpstreamError("Payment provider declined the confirmation") from RuntimeError("card")
    except UpstreamError as exc:
        response = global_exception_handler(exc, _context(request))
    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    assert response.data["error"]["message"] == "Payment provider declined the confirmation"
