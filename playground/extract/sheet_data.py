import logging
from typing import Union

from ..errors import TransportError
from ..models import QueryParameters, Result, SheetReference, TransportFailure
from ..urls import build_api_url, compact_pairs, sheet_path
from ..utils.config import Settings
from ..utils.http import get_json

logger = logging.getLogger(__name__)

DataOutcome = Union[Result, TransportFailure]


async def fetch_data(ref: SheetReference, params: QueryParameters, settings: Settings) -> DataOutcome:
    """
    Fetch rows for a resolved sheet.

    Any HTTP answer, including 404 and 5xx, becomes a Result so the caller
    can inspect the server's error body.
    """
    pairs = ref.selector.query_pairs() + params.query_pairs()
    api_url = build_api_url(
        ref.spreadsheet_id,
        pairs,
        base_url=settings.display_base,
        origin=settings.PUBLIC_ORIGIN,
    )
    url = settings.request_base() + sheet_path(ref.spreadsheet_id)

    logger.info(f"Fetching sheet data: {api_url}")
    try:
        resp = await get_json(
            url,
            params=compact_pairs(pairs),
            retries=settings.HTTP_RETRIES,
            backoff=settings.HTTP_BACKOFF,
        )
    except TransportError as exc:
        logger.error("Sheet data request failed: %s", exc)
        return TransportFailure(message=str(exc))

    logger.info(f"Sheet data response status: {resp.status}")
    return Result(api_url=api_url, status_code=resp.status, body=resp.body)
