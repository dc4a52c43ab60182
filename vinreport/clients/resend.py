import base64
import httpx
import logging
from typing import Dict, Any, List, Optional
from vinreport.config import settings
from vinreport.utils import report_filename

logger = logging.getLogger(__name__)


class EmailDispatchError(Exception):
    """Resend API error"""
    pass


class ResendClient:
    """Client for the Resend email API (report delivery)"""

    def __init__(
        self,
        api_key: str = None,
        sender: str = None,
        base_url: str = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.sender = sender or settings.REPORT_FROM_EMAIL
        self.base_url = (base_url or settings.RESEND_BASE_URL).rstrip('/')
        self.timeout = settings.HTTP_TIMEOUT
        self._transport = transport

    def build_message(self, to: List[str], vin: str, pdf: bytes) -> Dict[str, Any]:
        """Email payload with the report attached as base64"""
        return {
            'from': self.sender,
            'to': to,
            'subject': f"Your Vehicle History Report – {vin}",
            'html': "<p>Your vehicle history report is attached.</p>",
            'attachments': [
                {
                    'filename': report_filename(vin),
                    'content': base64.b64encode(pdf).decode('ascii'),
                    'contentType': 'application/pdf',
                }
            ],
        }

    async def send_report(self, to: str, vin: str, pdf: bytes) -> Dict[str, Any]:
        """
        Send the report PDF to a recipient.

        Returns:
            Resend response body (contains the message id)
        """
        message = self.build_message([to], vin, pdf)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/emails",
                    json=message,
                    headers={'Authorization': f'Bearer {self.api_key}'},
                )
            except httpx.HTTPError as e:
                logger.error(f"Resend request failed for {vin}: {e}")
                raise EmailDispatchError(str(e)) from e

            if response.status_code >= 400:
                logger.error(f"Resend rejected email for {vin}: HTTP {response.status_code} {response.text[:200]}")
                raise EmailDispatchError(f"Resend API error: HTTP {response.status_code}")

            try:
                data = response.json()
            except ValueError as e:
                logger.error(f"Resend returned non-JSON body for {vin}: {response.text[:200]}")
                raise EmailDispatchError(f"Unreadable Resend response: {e}") from e

            logger.info(f"Report email sent for {vin}: {data.get('id')}")
            return data
