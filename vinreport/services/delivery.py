"""
Report delivery: fetch the provider report, render it, email the PDF.

A fetch failure is never turned into an empty report; it propagates to
the caller. An empty or partial provider payload still renders, with
placeholders for whatever is missing.
"""

import logging
from typing import Any, Dict, Optional

from vinreport.clients import CarSimulcastClient, ResendClient
from vinreport.config import settings
from vinreport.utils import normalize_vin, is_valid_vin
from .pdf_generator import generate_report_pdf

logger = logging.getLogger(__name__)


async def deliver_report(
    vin: str,
    email: str,
    verbose: Optional[bool] = None,
    provider: CarSimulcastClient = None,
    mailer: ResendClient = None,
) -> Dict[str, Any]:
    """
    Fetch, render and email the vehicle history report for a VIN.

    Returns:
        Dict with vin, PDF size in bytes and the email API response.

    Raises:
        ValueError: malformed VIN.
        UpstreamFetchFailure: the provider did not return a report.
        RenderFailure: the PDF could not be produced.
        EmailDispatchError: the email API rejected the message.
    """
    normalized = normalize_vin(vin)
    if not normalized or not is_valid_vin(normalized):
        raise ValueError(f"Invalid VIN: {vin!r}")

    if verbose is None:
        verbose = settings.REPORT_VERBOSE
    provider = provider or CarSimulcastClient()
    mailer = mailer or ResendClient()

    logger.info(f"Delivering report for {normalized} to {email}")

    report = await provider.fetch_report(normalized)
    pdf = await generate_report_pdf({'vin': normalized, **report}, verbose=verbose)
    sent = await mailer.send_report(email, normalized, pdf)

    return {
        'vin': normalized,
        'size': len(pdf),
        'email': sent,
    }
