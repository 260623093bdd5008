"""Parser for the CNB daily fixing text format.

The feed looks like::

    15 Dec 2024 #242
    Country|Currency|Amount|Code|Rate
    Australia|dollar|1|AUD|15.123
    EMU|euro|1|EUR|25.500

The header line is structurally required and a malformed one raises
``ParseError``. Body rows are noisy by nature and bad rows are dropped.
"""

import logging
import re
from datetime import date
from decimal import Decimal, InvalidOperation

from domain.exceptions.rates import ParseError
from domain.models.rates import ParsedFeed, ParsedRate

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r'(\d{1,2})\s+(\w+)\s+(\d{4})')

MONTHS = {
	'Jan': '01',
	'Feb': '02',
	'Mar': '03',
	'Apr': '04',
	'May': '05',
	'Jun': '06',
	'Jul': '07',
	'Aug': '08',
	'Sep': '09',
	'Oct': '10',
	'Nov': '11',
	'Dec': '12',
}

FIELD_SEPARATOR = '|'
FIELD_COUNT = 5
HEADER_LINES = 2


def parse_feed_date(line: str) -> date:
	match = DATE_PATTERN.search(line)
	if not match:
		raise ParseError(f'Failed to parse date from: {line}')

	day, month_name, year = match.groups()
	month = MONTHS.get(month_name)
	if month is None:
		raise ParseError(f'Unknown month: {month_name} in date: {line}')

	try:
		return date.fromisoformat(f'{year}-{month}-{day.zfill(2)}')
	except ValueError as e:
		raise ParseError(f'Invalid date in: {line}') from e


def parse_rate_line(line: str) -> ParsedRate | None:
	parts = line.split(FIELD_SEPARATOR)
	if len(parts) != FIELD_COUNT:
		return None

	country, currency_name, amount, currency_code, rate = (p.strip() for p in parts)

	try:
		unit_amount = int(amount, 10)
		parsed_rate = Decimal(rate.replace(',', '.'))
	except (ValueError, InvalidOperation):
		logger.warning(f'Skipping invalid rate data: {line}')
		return None

	if not parsed_rate.is_finite():
		logger.warning(f'Skipping invalid rate data: {line}')
		return None

	return ParsedRate(
		country=country,
		currency_name=currency_name,
		unit_amount=unit_amount,
		currency_code=currency_code,
		rate=parsed_rate,
	)


def parse_feed(text: str) -> ParsedFeed:
	lines = text.strip().split('\n')
	feed_date = parse_feed_date(lines[0])

	rates = []
	for raw_line in lines[HEADER_LINES:]:
		line = raw_line.strip()
		if not line:
			continue

		parsed = parse_rate_line(line)
		if parsed is not None:
			rates.append(parsed)

	return ParsedFeed(date=feed_date, rates=tuple(rates))
