"""Error kinds raised or reported by the front-ends."""

from enum import Enum

DEFAULT_PREDICT_ERROR = "Failed to predict disease"


class ErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    INVALID_FILE_TYPE = "invalid_file_type"
    CAPTURE_FAILED = "capture_failed"
    NETWORK_FAILURE = "network_failure"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    MALFORMED_RESPONSE = "malformed_response"


class PotatoDoctorError(Exception):
    """Base class for all errors raised by this package."""


class PredictionError(PotatoDoctorError):
    """A /predict call that did not produce a usable result.

    ``message`` is the server supplied ``detail`` when there was one, otherwise
    the generic ``DEFAULT_PREDICT_ERROR``.
    """

    kind = ErrorKind.NETWORK_FAILURE

    def __init__(self, message: str = DEFAULT_PREDICT_ERROR):
        super().__init__(message)
        self.message = message


class NetworkFailure(PredictionError):
    kind = ErrorKind.NETWORK_FAILURE


class PredictionTimeout(PredictionError):
    kind = ErrorKind.TIMEOUT


class HttpStatusError(PredictionError):
    kind = ErrorKind.HTTP_STATUS

    def __init__(self, message: str = DEFAULT_PREDICT_ERROR, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(PredictionError):
    kind = ErrorKind.MALFORMED_RESPONSE
