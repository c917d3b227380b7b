"""Domain error kinds raised by the document workflow.

Services raise these instead of HTTP exceptions; main.py maps each kind to
a response status. Storage failures are not wrapped and surface as
SQLAlchemyError.
"""


class DocumentWorkflowError(Exception):
    """Base class for workflow violations reported to the caller."""

    status_code = 400
    error_code = "workflow_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DocumentWorkflowError):
    """Document, permission request or admin does not exist."""

    status_code = 404
    error_code = "not_found"


class ForbiddenError(DocumentWorkflowError):
    """Actor is not the owner, not the assigned admin, or lacks a grant."""

    status_code = 403
    error_code = "forbidden"


class BadRequestError(DocumentWorkflowError):
    """Illegal state transition or invalid input."""

    status_code = 400
    error_code = "bad_request"
