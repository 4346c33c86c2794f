"""
API url construction.

The url shown to the user must match the request actually sent, so both are
built from the same ordered (key, value) pairs.
"""
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit

from .models import QueryPairs

SHEET_PATH = "/sheet/{spreadsheet_id}"


def compact_pairs(pairs: QueryPairs) -> List[Tuple[str, str]]:
    """Drop unset values and stringify the rest, keeping order."""
    return [(key, str(value)) for key, value in pairs if value is not None]


def sheet_path(spreadsheet_id: str) -> str:
    return SHEET_PATH.format(spreadsheet_id=quote(spreadsheet_id, safe=""))


def build_api_url(
    spreadsheet_id: str,
    pairs: QueryPairs,
    base_url: Optional[str] = None,
    origin: Optional[str] = None,
) -> str:
    """
    Build the public API url for a spreadsheet.

    - base_url starting with http: `{base_url}/sheet/{id}?{query}`
    - otherwise, with a known origin (scheme://host): `{origin}{base_url}/sheet/{id}?{query}`
    - otherwise the relative `{base_url}/sheet/{id}?{query}`
    """
    base = (base_url or "").rstrip("/")
    query = urlencode(compact_pairs(pairs))
    path = sheet_path(spreadsheet_id)

    if base.startswith("http"):
        url = f"{base}{path}"
    elif origin:
        url = f"{origin.rstrip('/')}{base}{path}"
    else:
        url = f"{base}{path}"

    if query:
        url = f"{url}?{query}"
    return url


def extract_shared_sheet_url(link: str) -> str:
    """
    Unwrap a playground link of the form `...?sheetUrl=<encoded url>`.

    Anything that does not carry a sheetUrl parameter is returned unchanged.
    """
    parts = urlsplit(link.strip())
    values = parse_qs(parts.query).get("sheetUrl")
    if not values or not values[0]:
        return link
    return unquote(values[0])
