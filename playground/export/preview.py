"""
Rendering boundary: turns a ResponseState into text and exports row data.
"""
import json
import logging
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from ..models import Error, Idle, ResponseState, Result, TransportFailure

logger = logging.getLogger(__name__)


def pretty_body(body: Any) -> str:
    if isinstance(body, str):
        return body
    return json.dumps(body, ensure_ascii=False, indent=2)


def render_state(state: ResponseState) -> str:
    if isinstance(state, Idle):
        return ""
    if isinstance(state, Error):
        return f"Error\n{state.message}"
    if isinstance(state, TransportFailure):
        return f"Error\nno response from api server: {state.message}"
    if isinstance(state, Result):
        lines = [
            "Response",
            f"API url: {state.api_url}",
            f"response code: {state.status_code}",
            "response body:",
            pretty_body(state.body),
        ]
        return "\n".join(lines)
    raise TypeError(f"unknown response state: {state!r}")


def result_rows(state: ResponseState) -> Optional[list]:
    """Rows of a successful result, if the body is a list of objects."""
    if not isinstance(state, Result) or state.status_code != 200:
        return None
    body = state.body
    # A single-row request answers with one object
    if isinstance(body, dict):
        body = [body]
    if isinstance(body, list) and body and all(isinstance(r, dict) for r in body):
        return body
    return None


def export_csv(state: ResponseState, csv_path: Path) -> Optional[Path]:
    """Write the result rows to CSV. Returns None when there is nothing tabular."""
    rows = result_rows(state)
    if rows is None:
        logger.warning("Result body is not tabular, nothing exported")
        return None

    df = pd.json_normalize(rows)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(csv_path, index=False)
    logger.info(f"Exported {len(df)} row(s) to {csv_path}")
    return csv_path
