import requests
import logging
from typing import Any, Dict, Mapping, Optional
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception
from pydantic import ValidationError

from config import settings
from errors import ApiError, ConfigurationError, TransportError
from models import ApiDocument
from normalization import flatten_query

logger = logging.getLogger(__name__)
TRANSIENT_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}


def _is_retryable_request_exception(exc: BaseException) -> bool:
    if isinstance(exc, (requests.Timeout, requests.ConnectionError)):
        return True
    if isinstance(exc, requests.HTTPError):
        status_code = exc.response.status_code if exc.response is not None else None
        return status_code in TRANSIENT_STATUS_CODES
    return False


def _api_errors_from_response(response: Optional[requests.Response]) -> Optional[ApiDocument]:
    """Return the JSON:API error document carried by an error response, if any."""
    if response is None:
        return None
    try:
        document = ApiDocument.model_validate(response.json())
    except (ValueError, ValidationError):
        return None
    return document if document.errors else None


class ChipApiClient:
    """Authenticated GET client for the BestCheck API."""

    def __init__(
        self,
        username: Optional[str],
        password: Optional[str],
        base_uri: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        if not username or not password:
            raise ConfigurationError("HTTP authentication must be configured")
        self.base_uri = (base_uri or settings.API_BASE_URI).rstrip("/")
        self.timeout = timeout or settings.DEFAULT_TIMEOUT
        self.session = session or requests.Session()
        self.session.auth = (username, password)
        self.session.headers.update({"Accept": "application/json"})

    @classmethod
    def from_credentials(cls, credentials, **kwargs) -> "ChipApiClient":
        return cls(credentials.get_username(), credentials.get_password(), **kwargs)

    @retry(
        stop=stop_after_attempt(max(settings.MAX_RETRIES, 1)),
        wait=wait_exponential(multiplier=max(settings.RETRY_DELAY, 1), min=1, max=12),
        retry=retry_if_exception(_is_retryable_request_exception),
        reraise=True,
    )
    def _make_request(self, url: str, params: Dict[str, str]) -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"HTTP Error for {url}: {status_code} - {e.response.text if e.response is not None else str(e)}")
            raise e

    def request(self, path: str, query: Optional[Mapping[str, Any]] = None) -> ApiDocument:
        """GET `path` and decode the JSON:API document.

        Raises ApiError when the document reports errors, TransportError for
        network, HTTP status and decoding failures.
        """
        url = f"{self.base_uri}/{path.lstrip('/')}"
        params = flatten_query(query or {})
        logger.debug(f"ChipApiClient: GET {url} {params}")
        try:
            payload = self._make_request(url, params)
        except requests.HTTPError as e:
            document = _api_errors_from_response(e.response)
            if document is not None:
                raise ApiError(document.errors) from e
            status_code = e.response.status_code if e.response is not None else None
            raise TransportError(f"HTTP error for {url}: {status_code}", status_code=status_code) from e
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise TransportError(f"Invalid JSON in response from {url}: {e}") from e

        if not isinstance(payload, dict):
            raise TransportError(f"Unexpected response body from {url}")
        try:
            document = ApiDocument.model_validate(payload)
        except ValidationError as e:
            raise TransportError(f"Malformed API document from {url}: {e}") from e
        if document.errors:
            raise ApiError(document.errors)
        return document
