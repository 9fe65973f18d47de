"""
Classification Client
Wrapper for the remote flood prediction model.
"""

import logging
from typing import Any, Dict

import requests

from floodwatch.core.exceptions import ClassificationException
from floodwatch.schemas.reading import ReadingValues

logger = logging.getLogger(__name__)


class ClassificationClient:
    """Client for the remote flood prediction service."""

    def __init__(self, base_url: str, timeout: float = 10.0):
        """
        Initialize the client.

        Args:
            base_url: Root URL of the prediction service (e.g. http://ml:8000)
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def predict(self, values: ReadingValues) -> Dict[str, Any]:
        """
        Ask the model for a verdict on one reading.

        Returns the response body with lower-cased keys. Raises
        ClassificationException on timeout, connection failure, non-2xx status
        or a body that is not a JSON object.
        """
        url = self._url("predict")
        # Field names expected by the deployed model
        payload = {
            "h_kanan": values.right_level,
            "h_kiri": values.left_level,
            "q_kanan": values.right_flow,
            "q_kiri": values.left_flow,
        }
        try:
            logger.debug(f"Classifier request: POST {url} with {payload}")
            resp = self._session.post(url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except requests.exceptions.Timeout as e:
            raise ClassificationException(
                "Classification service timed out", {"url": url, "timeout": self.timeout}
            ) from e
        except requests.exceptions.HTTPError as e:
            raise ClassificationException(
                "Classification service returned an error",
                {"url": url, "status_code": e.response.status_code if e.response is not None else None},
            ) from e
        except requests.exceptions.RequestException as e:
            raise ClassificationException(
                "Classification service unreachable", {"url": url, "error": str(e)}
            ) from e
        except ValueError as e:
            raise ClassificationException(
                "Classification service returned invalid JSON", {"url": url}
            ) from e

        if not isinstance(body, dict):
            raise ClassificationException(
                "Classification service returned an unexpected body", {"url": url}
            )

        logger.debug(f"Classifier response: {body}")
        return {str(key).lower(): value for key, value in body.items()}
