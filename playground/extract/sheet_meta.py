import logging
from typing import Optional, Union
from urllib.parse import quote

from pydantic import ValidationError

from ..errors import TransportError
from ..models import Error, SheetMetaResponse, SheetReference, TransportFailure
from ..utils.config import Settings
from ..utils.http import get_json

logger = logging.getLogger(__name__)

API_SERVER_NOT_FOUND = "api server not found"
SHEET_URL_INVALID = "sheet url is invalid"

MetaOutcome = Union[SheetReference, Error, TransportFailure]


def has_sheet_url(sheet_url: Optional[str]) -> bool:
    return bool(sheet_url and sheet_url.strip())


async def resolve_meta(sheet_url: Optional[str], settings: Settings) -> Optional[MetaOutcome]:
    """
    Resolve a shared spreadsheet url into a canonical SheetReference.

    Returns None for empty input (nothing is requested), an Error for any
    non-200 answer and a TransportFailure when the server cannot be reached.
    """
    if not has_sheet_url(sheet_url):
        return None

    url = f"{settings.request_base()}/sheet_meta"
    # The server decodes sheet_url once more after the query string itself is decoded
    params = [("sheet_url", quote(sheet_url, safe=""))]

    try:
        resp = await get_json(url, params=params, retries=settings.HTTP_RETRIES, backoff=settings.HTTP_BACKOFF)
    except TransportError as exc:
        logger.error("Sheet meta request failed: %s", exc)
        return TransportFailure(message=str(exc))

    logger.info(f"Sheet meta response status: {resp.status}")
    if resp.status == 404:
        return Error(message=API_SERVER_NOT_FOUND)
    if resp.status != 200:
        return Error(message=SHEET_URL_INVALID)

    try:
        meta = SheetMetaResponse.model_validate(resp.body)
    except ValidationError as exc:
        logger.warning("Unexpected sheet meta payload: %s", exc)
        return Error(message=SHEET_URL_INVALID)

    return meta.to_reference()


async def fetch_service_account(settings: Settings) -> Optional[str]:
    """E-mail of the service account a private sheet must be shared with."""
    url = f"{settings.request_base()}/meta"
    try:
        resp = await get_json(url, retries=settings.HTTP_RETRIES, backoff=settings.HTTP_BACKOFF)
    except TransportError as exc:
        logger.warning("Service account lookup failed: %s", exc)
        return None

    if resp.status != 200 or not isinstance(resp.body, dict):
        logger.warning(f"Service account lookup returned {resp.status}")
        return None
    return resp.body.get("service_account")
