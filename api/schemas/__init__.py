from .responses import CurrencyResponse, HealthResponse, RateResponse

__all__ = [
	'CurrencyResponse',
	'HealthResponse',
	'RateResponse',
]
