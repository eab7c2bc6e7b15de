"""
DME Intake API Gateway.

Serializes extraction results to the intake wire format and posts them to
the external intake API. Only fields that are set and non-empty are sent.
"""

from typing import Any, Optional

import httpx

from dme_intake.gateways.base import GatewayConfig, with_retry
from dme_intake.schemas.dme import ExtractionResult
from dme_intake.utils.logging import get_logger, get_phi_logger

logger = get_logger(__name__)
phi_logger = get_phi_logger(__name__)


TEST_ENDPOINT_MARKERS = ("alert-api.com", "test", "localhost")


def build_intake_payload(result: ExtractionResult) -> dict[str, Any]:
    """
    Convert an extraction result to the intake API payload.

    Args:
        result: Extraction result

    Returns:
        Dict keyed by wire names (device, mask_type, add_ons, qualifier,
        ordering_provider, liters, usage, patient_name, dob, diagnosis);
        unset and empty fields are omitted, add-ons are a sorted list.
    """
    data = result.model_dump(by_alias=True, exclude_none=True)

    payload: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, (set, frozenset)):
            value = sorted(value)
        if value == "" or value == []:
            continue
        payload[key] = value
    return payload


def is_test_endpoint(endpoint: str) -> bool:
    """Check if an endpoint looks like a placeholder or local test host."""
    return any(marker in endpoint for marker in TEST_ENDPOINT_MARKERS)


class DmeIntakeGateway:
    """
    Submits extracted DME orders to the intake API.

    Transport errors and timeouts are retried with exponential backoff;
    HTTP error responses are not retried.
    """

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize DmeIntakeGateway.

        Args:
            config: Gateway configuration; built from settings when omitted
            http_client: Shared client; the gateway creates and owns one when omitted
        """
        self.config = config or GatewayConfig.from_settings()
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client if the gateway created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "DmeIntakeGateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def submit(self, result: ExtractionResult) -> bool:
        """
        Submit an extraction result.

        Args:
            result: Extraction result to submit

        Returns:
            True when the API answered with a success status

        Raises:
            ValueError: If result is None
        """
        if result is None:
            logger.error("DME data is null, cannot submit to API")
            raise ValueError("DME data cannot be None")

        payload = build_intake_payload(result)
        logger.info(f"Preparing to submit DME data to API endpoint: {self.endpoint}")
        phi_logger.debug(f"Generated JSON payload for submission: {payload}")

        if is_test_endpoint(self.endpoint):
            logger.warning(f"Attempting to submit to test/fake API endpoint: {self.endpoint}")
            logger.info(
                "Configure a real endpoint with the DME_API_ENDPOINT setting"
            )

        post = with_retry(
            max_attempts=self.config.retry_attempts,
            delay=self.config.retry_delay_seconds,
            backoff_factor=self.config.backoff_factor,
            exceptions=(httpx.TransportError,),
        )(self._post)

        try:
            response = await post(payload)
        except httpx.TimeoutException:
            logger.error(
                f"API request timed out after {self.config.timeout_seconds} seconds "
                f"when submitting to: {self.endpoint}"
            )
            return False
        except httpx.TransportError as e:
            logger.error(f"HTTP request failed when submitting DME data to {self.endpoint}: {e}")
            return False

        if response.is_success:
            logger.info(
                f"API submission successful. Status: {response.status_code}, "
                f"Response: {response.text}"
            )
            return True

        logger.error(
            f"API submission failed. Status: {response.status_code}, Error: {response.text}"
        )
        return False

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        return await self._get_client().post(self.endpoint, json=payload)
