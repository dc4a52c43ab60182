from .vin import normalize_vin, is_valid_vin, report_filename

__all__ = ["normalize_vin", "is_valid_vin", "report_filename"]
