"""
Client for the free NHTSA vPIC VIN decoder.
Used for the identity preview before a paid report is ordered.
"""

import httpx
import logging
from typing import Dict, Optional
from vinreport.config import settings

logger = logging.getLogger(__name__)

# vPIC variable name → our key
_VARIABLES = {
    'make': 'Make',
    'model': 'Model',
    'year': 'Model Year',
}


class VinDecodeError(Exception):
    """NHTSA decoder error"""
    pass


class NhtsaClient:
    """Client for vpic.nhtsa.dot.gov DecodeVin endpoint"""

    def __init__(self, base_url: str = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = (base_url or settings.NHTSA_BASE_URL).rstrip('/')
        self.timeout = settings.HTTP_TIMEOUT
        self._transport = transport

    async def decode_vin(self, vin: str) -> Dict[str, str]:
        """
        Decode basic vehicle identity.

        Returns:
            Dict with vin, make, model, year ("N/A" where vPIC has no value)
        """
        url = f"{self.base_url}/DecodeVin/{vin}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params={'format': 'json'})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"NHTSA decode failed for {vin}: {e}")
            raise VinDecodeError(f"Lookup failed: {e}") from e

        results = data.get('Results') or []
        values = {
            r.get('Variable'): r.get('Value')
            for r in results
            if isinstance(r, dict)
        }

        decoded = {'vin': vin}
        for key, variable in _VARIABLES.items():
            decoded[key] = values.get(variable) or 'N/A'
        return decoded
