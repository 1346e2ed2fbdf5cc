"""Error types for printdesk and their JSON rendering."""

import logging

from flask import Flask, json, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class PrintDeskError(Exception):
    """Base exception for errors reported to API clients."""
    
    status_code = 500
    
    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field
    
    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.field is not None:
            body["field"] = self.field
        return body


class ValidationError(PrintDeskError):
    """Raised when submitted input is missing or malformed."""
    status_code = 400


class FileTooLargeError(ValidationError):
    """Raised when an uploaded file exceeds the per-file size cap."""
    status_code = 413


class UnauthorizedError(PrintDeskError):
    """Raised when an operator-only action is attempted without a session."""
    status_code = 401
    
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(PrintDeskError):
    """Base class for missing resources."""
    status_code = 404


class JobNotFoundError(NotFoundError):
    """Raised when no job row exists for the requested id."""
    
    def __init__(self, job_id: int):
        super().__init__("Job not found")
        self.job_id = job_id


class StoredFileMissingError(NotFoundError):
    """Raised when a job row exists but its stored file is gone."""
    
    def __init__(self, job_id: int):
        super().__init__("File not found on disk")
        self.job_id = job_id


class InvalidTransitionError(PrintDeskError):
    """Raised when a status change is not allowed from the job's current status."""
    status_code = 409


def register_error_handlers(app: Flask) -> None:
    """Render all API errors as JSON ``{"message": ...}`` bodies.
    
    Args:
        app: Flask application instance.
    """
    
    @app.errorhandler(PrintDeskError)
    def handle_printdesk_error(error: PrintDeskError):
        return jsonify(error.to_dict()), error.status_code
    
    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        message = error.description or error.name
        if error.code == 413:
            message = "Upload too large"
        # Keep werkzeug's response so headers such as Allow survive
        response = error.get_response()
        response.set_data(json.dumps({"message": message}))
        response.content_type = "application/json"
        return response
    
    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.exception(f"Unhandled error: {error}")
        return jsonify({"message": "Internal server error"}), 500
