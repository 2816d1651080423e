"""
HTTP client submitting encoded multipart/form-data bodies.
"""
import logging
from typing import Any, Dict, Optional, Tuple

import requests

import config
from encoder.form_encoder import encode, encode_field
from utils.rate_limiter import RateLimiter
from utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)


class FormClient:
    """Client posting multipart forms to a single base URL."""

    def __init__(
        self,
        base_url: str = config.FORM_ENDPOINT_URL,
        requests_per_second: int = config.REQUESTS_PER_SECOND,
        timeout: Tuple[float, float] = (config.CONNECT_TIMEOUT, config.READ_TIMEOUT),
        max_retries: int = config.MAX_RETRIES,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize form client.

        Args:
            base_url: URL that endpoints are resolved against
            requests_per_second: Rate limit (requests per second)
            timeout: (connect, read) timeouts in seconds
            max_retries: Maximum retry attempts per submission
            session: Session to reuse; a new one is created when omitted
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limiter = RateLimiter(requests_per_second, period=1.0)
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": "multipart-encoder/1.0"
        })
        # Retries are handled by retry_with_backoff
        adapter = requests.adapters.HTTPAdapter(max_retries=0)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self._post_with_retry = retry_with_backoff(max_retries=max_retries)(self._post)

    def _url(self, endpoint: str) -> str:
        if not endpoint:
            return self.base_url
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _post(self, url: str, body: bytes, content_type: str) -> requests.Response:
        self.rate_limiter.wait_if_needed()

        response = self.session.post(
            url,
            data=body,
            headers={"Content-Type": content_type},
            timeout=self.timeout
        )
        response.raise_for_status()
        return response

    def post_body(self, endpoint: str, body: bytes, content_type: str) -> requests.Response:
        """
        Send an already encoded body, retrying transient failures.

        Raises:
            requests.exceptions.RequestException: When the submission fails
        """
        url = self._url(endpoint)
        logger.info(f"Submitting {len(body)} bytes to {url}")
        try:
            response = self._post_with_retry(url, body, content_type)
        except requests.exceptions.RequestException as e:
            logger.error(f"Submission to {url} failed: {e}")
            raise
        logger.info(f"Submission to {url} accepted with status {response.status_code}")
        return response

    def submit(self, endpoint: str, value: Any, **options: Any) -> requests.Response:
        """
        Encode an aggregate or mapping and post it.

        The body is encoded once, so file-like values are read a single time
        even when the request is retried.

        Args:
            endpoint: Endpoint relative to base_url, or an absolute URL
            value: Aggregate or mapping to encode
            **options: Passed to the encoder

        Returns:
            The successful response
        """
        body, content_type = encode(value, **options)
        return self.post_body(endpoint, body, content_type)

    def submit_field(self, endpoint: str, value: Any, fieldname: str, **options: Any) -> requests.Response:
        """Encode a single value under ``fieldname`` and post it."""
        body, content_type = encode_field(value, fieldname, **options)
        return self.post_body(endpoint, body, content_type)

    def submit_json_response(self, endpoint: str, value: Any, **options: Any) -> Dict:
        """Submit and decode the JSON reply; an empty reply gives an empty dict."""
        response = self.submit(endpoint, value, **options)
        if not response.content:
            return {}
        return response.json()
