"""Unit tests for the API exception hierarchy."""

import warnings

from rewear_api.exceptions import BusinessLogicException, ValidationException


class TestExceptions:
    """Test cases for exception status codes and details."""

    def test_business_logic_exception_is_422_without_warnings(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            exc = BusinessLogicException("Insufficient points", rule="balance")

        assert exc.status_code == 422
        assert exc.error_code == "business_logic_error"
        assert exc.details == {"rule": "balance"}

    def test_validation_exception_carries_field_errors(self):
        errors = [{"field": "body -> title", "message": "Field required", "type": "missing"}]

        exc = ValidationException("Validation failed", errors=errors)

        assert exc.status_code == 400
        assert exc.error_code == "validation_error"
        assert exc.details == {"validation_errors": errors}

    def test_validation_exception_without_errors(self):
        assert ValidationException("Validation failed").details == {}
