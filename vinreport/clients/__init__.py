from .carsimulcast import CarSimulcastClient, UpstreamFetchFailure, RateLimitError, ProviderUnavailable
from .nhtsa import NhtsaClient, VinDecodeError
from .resend import ResendClient, EmailDispatchError

__all__ = [
    "CarSimulcastClient", "UpstreamFetchFailure", "RateLimitError", "ProviderUnavailable",
    "NhtsaClient", "VinDecodeError",
    "ResendClient", "EmailDispatchError",
]
