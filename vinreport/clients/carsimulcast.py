import httpx
import json
import logging
from typing import Dict, Any, List, Optional
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from vinreport.config import settings

logger = logging.getLogger(__name__)

# Dedicated logger for provider responses (file handler configured in main)
responses_logger = logging.getLogger('carsimulcast.responses')


class UpstreamFetchFailure(Exception):
    """Vehicle history report could not be obtained from the provider"""
    pass


class RateLimitError(UpstreamFetchFailure):
    """Rate limit exceeded"""
    pass


class ProviderUnavailable(UpstreamFetchFailure):
    """Provider returned a 5xx response"""
    pass


class CarSimulcastClient:
    """
    Client for the CarSimulcast vehicle history API.

    The provider has changed its credential header names more than once,
    so every known scheme is tried in order until one is accepted.
    """

    def __init__(
        self,
        api_key: str = None,
        api_secret: str = None,
        base_url: str = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.CARSIMULCAST_API_KEY
        self.api_secret = api_secret if api_secret is not None else settings.CARSIMULCAST_API_SECRET
        self.base_url = (base_url or settings.CARSIMULCAST_BASE_URL).rstrip('/')
        self.report_type = settings.CARSIMULCAST_REPORT_TYPE
        self.timeout = settings.HTTP_TIMEOUT
        self._transport = transport

    def _auth_attempts(self) -> List[Dict[str, str]]:
        """Credential header schemes, in the order they are tried"""
        return [
            {'api-key': self.api_key, 'api-secret': self.api_secret},
            {'x-api-key': self.api_key, 'x-api-secret': self.api_secret},
            {'X-API-KEY': self.api_key, 'X-API-SECRET': self.api_secret},
            {'Authorization': f'Bearer {self.api_key}'},
        ]

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=2, min=4, max=30),
        retry=retry_if_exception_type((RateLimitError, ProviderUnavailable)),
        reraise=True,
    )
    async def _get(self, url: str, headers: Dict[str, str]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(url, headers=headers)

            if response.status_code == 429:
                logger.warning("CarSimulcast rate limit hit, retrying...")
                raise RateLimitError("Rate limit exceeded")

            if response.status_code >= 500:
                logger.warning(f"CarSimulcast unavailable (HTTP {response.status_code}), retrying...")
                raise ProviderUnavailable(f"Service unavailable: HTTP {response.status_code}")

            return response

    async def fetch_report(self, vin: str) -> Dict[str, Any]:
        """
        Fetch the vehicle history report for a VIN.

        Returns:
            Raw report mapping as delivered by the provider.

        Raises:
            UpstreamFetchFailure: no credential scheme produced a report.
        """
        url = f"{self.base_url}/getrecord/{self.report_type}/{vin}"

        for idx, headers in enumerate(self._auth_attempts(), start=1):
            scheme = ', '.join(headers)
            try:
                response = await self._get(url, headers)
            except RateLimitError as e:
                raise UpstreamFetchFailure(f"CarSimulcast rate limit exceeded for {vin}") from e
            except ProviderUnavailable as e:
                raise UpstreamFetchFailure(f"CarSimulcast unavailable for {vin}: {e}") from e
            except httpx.HTTPError as e:
                logger.warning(f"CarSimulcast request failed (scheme {idx}: {scheme}): {e}")
                continue

            if response.status_code >= 400:
                logger.info(f"CarSimulcast rejected scheme {idx} ({scheme}): HTTP {response.status_code}")
                continue

            try:
                data = response.json()
            except ValueError:
                logger.warning(f"CarSimulcast returned non-JSON body for scheme {idx}")
                continue

            if not isinstance(data, dict) or data.get('status') == 'error':
                logger.info(f"CarSimulcast error payload for scheme {idx}: {str(data)[:200]}")
                continue

            logger.info(f"CarSimulcast report fetched for {vin} using scheme {idx} ({scheme})")
            responses_logger.debug(
                f"Report {vin}: {json.dumps(data, ensure_ascii=False, default=str)}"
            )
            return data

        raise UpstreamFetchFailure("CarSimulcast authentication failed. Check API keys.")
