import re
from dataclasses import dataclass

import requests
import urllib3
from pydantic import ValidationError

from potato_doctor.config import Settings
from potato_doctor.errors import (
    DEFAULT_PREDICT_ERROR,
    HttpStatusError,
    MalformedResponse,
    NetworkFailure,
    PredictionError,
    PredictionTimeout,
)
from potato_doctor.models import ImageSource, PredictionResult
from potato_doctor.utils.logger import logger

DEFAULT_CONTENT_TYPE = "image/jpeg"
_EXTENSION_RE = re.compile(r"\.(\w+)$")


def guess_content_type(filename: str) -> str:
    """Content type from the trailing ``.ext`` of ``filename``, ``image/jpeg`` otherwise."""
    match = _EXTENSION_RE.search(filename)
    return f"image/{match.group(1)}" if match else DEFAULT_CONTENT_TYPE


def filename_from_uri(uri: str) -> str:
    return uri.rstrip("/").split("/")[-1]


@dataclass(frozen=True)
class PredictionOutcome:
    """Either a result or an error, never both."""

    result: PredictionResult | None = None
    error: PredictionError | None = None

    def __post_init__(self):
        if (self.result is None) == (self.error is None):
            raise ValueError("PredictionOutcome needs exactly one of result or error")

    @property
    def ok(self) -> bool:
        return self.result is not None


def _error_detail(response: requests.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("detail"), str) and body["detail"]:
        return body["detail"]
    return None


class PredictionClient:
    """Client for the classification backend's /predict and /ping endpoints."""

    def __init__(self, base_url: str, predict_timeout: float = 30.0, ping_timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.predict_timeout = predict_timeout
        self.ping_timeout = ping_timeout

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def predict(self, image: ImageSource) -> PredictionResult:
        """POST ``image`` as the multipart ``file`` field and parse the result.

        Raises:
            PredictionTimeout: If the backend did not answer within ``predict_timeout``.
            NetworkFailure: If the backend could not be reached.
            HttpStatusError: If the backend answered with a non-2xx status.
            MalformedResponse: If the body is not JSON with ``class`` and ``confidence``.
        """
        files = {"file": (image.filename, image.data, image.content_type)}
        url = self._url("/predict")
        try:
            r = requests.post(url, files=files, timeout=self.predict_timeout)
        except requests.Timeout as exc:
            logger.error("Prediction request to %s timed out after %ss", url, self.predict_timeout)
            raise PredictionTimeout() from exc
        except (requests.RequestException, urllib3.exceptions.HTTPError, ValueError) as exc:
            # urllib3 parse errors such as LocationParseError escape requests unwrapped
            logger.error("Prediction request to %s failed: %s", url, exc)
            raise NetworkFailure() from exc

        if not 200 <= r.status_code < 300:
            detail = _error_detail(r)
            logger.error("API Error: %s %s", r.status_code, detail or r.text[:200])
            raise HttpStatusError(detail or DEFAULT_PREDICT_ERROR, status_code=r.status_code)

        try:
            return PredictionResult.model_validate(r.json())
        except (ValueError, ValidationError) as exc:
            logger.error("Prediction response from %s is malformed: %s", url, exc)
            raise MalformedResponse() from exc

    def try_predict(self, image: ImageSource) -> PredictionOutcome:
        try:
            return PredictionOutcome(result=self.predict(image))
        except PredictionError as exc:
            return PredictionOutcome(error=exc)

    def ping(self) -> bool:
        """True only when GET /ping answers 200 within ``ping_timeout``. Never raises."""
        try:
            r = requests.get(self._url("/ping"), timeout=self.ping_timeout)
        except Exception as exc:
            logger.info("Ping to %s failed: %s", self.base_url, exc)
            return False
        return r.status_code == 200


def build_client(settings: Settings):
    """Real client for ``settings.api_url``, or the offline mock when ``use_mock`` is set."""
    if settings.use_mock:
        from potato_doctor.utils.mock_api_client import MockPredictionClient

        logger.info("Using mock prediction client")
        return MockPredictionClient()
    return PredictionClient(
        settings.api_url,
        predict_timeout=settings.predict_timeout,
        ping_timeout=settings.ping_timeout,
    )
