# nosec B101


from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from domain.exceptions.rates import ParseError, UpstreamError
from infrastructure.providers.cnb import CNB_DAILY_URL, CNBFeedFetcher, format_feed_date


FEED_TEXT = '15 Dec 2024 #242\nCountry|Currency|Amount|Code|Rate\nEMU|euro|1|EUR|25.500\n'


def make_response(status_code=200, text=FEED_TEXT):
    response = Mock()
    response.status_code = status_code
    response.is_success = 200 <= status_code < 300
    response.text = text
    return response


def test_format_feed_date_pads_day_and_month():
    assert format_feed_date(date(2024, 3, 5)) == '05.03.2024'
    assert format_feed_date(date(2024, 12, 15)) == '15.12.2024'


@pytest.mark.asyncio
async def test_fetch_latest_requests_base_url_without_params():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = make_response()

    fetcher = CNBFeedFetcher(client=mock_client)
    feed = await fetcher.fetch()

    assert feed.date == date(2024, 12, 15)
    assert len(feed.rates) == 1
    assert feed.rates[0].rate == Decimal('25.500')
    mock_client.get.assert_called_once_with(CNB_DAILY_URL, params=None)


@pytest.mark.asyncio
async def test_fetch_for_date_sends_formatted_date_param():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = make_response()

    fetcher = CNBFeedFetcher(base_url='https://feed.test/daily.txt', client=mock_client)
    await fetcher.fetch(date(2024, 12, 13))

    call_args = mock_client.get.call_args
    assert call_args[0][0] == 'https://feed.test/daily.txt'
    assert call_args[1]['params'] == {'date': '13.12.2024'}


@pytest.mark.asyncio
async def test_fetch_non_success_status_raises_upstream_error():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = make_response(status_code=503, text='Service Unavailable')

    fetcher = CNBFeedFetcher(client=mock_client)

    with pytest.raises(UpstreamError) as exc_info:
        await fetcher.fetch()

    assert exc_info.value.status_code == 503
    assert '503' in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_network_error_raises_upstream_error_without_status():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = httpx.ConnectError('Connection refused')

    fetcher = CNBFeedFetcher(client=mock_client)

    with pytest.raises(UpstreamError) as exc_info:
        await fetcher.fetch()

    assert exc_info.value.status_code is None
    assert 'request failed' in str(exc_info.value).lower()


@pytest.mark.asyncio
async def test_fetch_timeout_raises_upstream_error():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.side_effect = httpx.TimeoutException('Request timed out')

    fetcher = CNBFeedFetcher(client=mock_client)

    with pytest.raises(UpstreamError):
        await fetcher.fetch(date(2024, 12, 13))


@pytest.mark.asyncio
async def test_fetch_propagates_parse_error_unchanged():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = make_response(text='<html>maintenance</html>')

    fetcher = CNBFeedFetcher(client=mock_client)

    with pytest.raises(ParseError):
        await fetcher.fetch()


@pytest.mark.asyncio
async def test_fetch_over_mock_transport():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text=FEED_TEXT, headers={'content-type': 'text/plain'})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    fetcher = CNBFeedFetcher(base_url='https://feed.test/daily.txt', client=client)

    feed = await fetcher.fetch(date(2024, 12, 15))
    await fetcher.close()

    assert feed.date == date(2024, 12, 15)
    assert requests[0].url.params['date'] == '15.12.2024'


@pytest.mark.asyncio
async def test_close_closes_client():
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    fetcher = CNBFeedFetcher(client=mock_client)

    await fetcher.close()

    mock_client.aclose.assert_awaited_once()


def test_name_is_cnb():
    fetcher = CNBFeedFetcher(client=AsyncMock(spec=httpx.AsyncClient))

    assert fetcher.name == 'cnb'
