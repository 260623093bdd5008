class RatesException(Exception):
	pass


class FeedError(RatesException):
	pass


class ParseError(FeedError):
	pass


class UpstreamError(FeedError):
	def __init__(self, message: str, status_code: int | None = None):
		super().__init__(message)
		self.status_code = status_code


class InvalidCurrencyError(RatesException):
	pass


class CurrencyNotFoundError(RatesException):
	pass


class CacheError(RatesException):
	pass
