# timesheet_api/common/errors.py
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import IntegrityError
from timesheet_api.common.http import fail


class APIError(Exception):
    """Custom API Error class."""
    status_code = 400
    code = "API_ERROR"

    def __init__(self, message, code=None, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code
        self.payload = payload


class ValidationError(APIError):
    """Malformed input; raised before anything is written."""
    status_code = 422
    code = "VALIDATION_ERROR"


class NotFoundError(APIError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(APIError):
    status_code = 409
    code = "CONFLICT"


class PeriodClosedError(ConflictError):
    code = "PERIOD_CLOSED"

    def __init__(self, week_key):
        super().__init__(f"Week {week_key} is closed", payload={"week_key": week_key})
        self.week_key = week_key


class UpstreamError(APIError):
    status_code = 502
    code = "UPSTREAM_ERROR"


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def _api_error(e: APIError):
        return fail(message=e.message, status=e.status_code, code=e.code, detail=e.payload)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(message=e.description or e.name, status=e.code or 500)

    @app.errorhandler(IntegrityError)
    def _integrity(e: IntegrityError):
        # 409 for unique/FK violations
        return fail(message="Conflict / integrity error", status=409, code="CONSTRAINT_ERROR",
                    detail=str(e.orig) if getattr(e, "orig", None) else str(e))

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        app.logger.exception(e)
        return fail(message="Internal server error", status=500)
