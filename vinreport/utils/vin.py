import re
from typing import Optional

# 17 characters, letters I / O / Q never appear
_VIN_RE = re.compile(r'^[A-HJ-NPR-Z0-9]{17}$')


def normalize_vin(raw: str) -> Optional[str]:
    """
    Normalize a VIN to canonical form.
    Examples:
        " 1hgcm82633a004352 " → "1HGCM82633A004352"
        "1HG-CM826 33A004352" → "1HGCM82633A004352"
    """
    if not raw:
        return None

    cleaned = re.sub(r'[\s\-]', '', raw).upper()
    return cleaned or None


def is_valid_vin(vin: str) -> bool:
    """
    Validate VIN shape.
    The North American check digit is not enforced: imports and
    pre-1981 vehicles routinely fail it.
    """
    if not vin:
        return False

    return bool(_VIN_RE.match(vin.strip().upper()))


def report_filename(vin: str) -> str:
    """Attachment filename for a VIN report."""
    safe = re.sub(r'[^A-Za-z0-9]', '', vin or '') or 'UNKNOWN'
    return f"VIN-{safe}.pdf"
