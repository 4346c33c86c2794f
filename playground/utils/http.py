import json
import aiohttp
import asyncio
import logging
from typing import Any, NamedTuple, Optional, Sequence, Tuple

from ..errors import TransportError

logger = logging.getLogger(__name__)


class HttpResponse(NamedTuple):
    status: int
    body: Any


def _decode_body(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


async def get_json(
    url: str,
    params: Optional[Sequence[Tuple[str, str]]] = None,
    retries: int = 1,
    backoff: float = 1.0,
) -> HttpResponse:
    """
    GET `url` and return its status and decoded body, whatever the status.

    Only a missing response (connection refused, DNS failure, reset...) is
    retried. After the last attempt it is raised as TransportError.
    """
    last_exc: Optional[Exception] = None
    for attempt in range(1, retries + 1):
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(url, params=params) as resp:
                    # Undecodable bytes become U+FFFD instead of raising
                    text = await resp.text(errors="replace")
                    logger.debug("GET %s -> %s", url, resp.status)
                    return HttpResponse(resp.status, _decode_body(text))
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            last_exc = exc
            logger.warning("HTTP request failed (attempt %s/%s) %s: %s", attempt, retries, url, exc)
            if attempt < retries:
                await asyncio.sleep(backoff * attempt)
    raise TransportError(url, last_exc)
