"""
Two-stage pipeline: resolve the sheet url, then fetch its data.

The orchestrator owns the only ResponseState and searching flag. Each
submission gets a sequence number and only the latest one may write state,
so a slow earlier request can never replace a newer result.
"""
import logging
from typing import Optional

from .extract.sheet_data import fetch_data
from .extract.sheet_meta import has_sheet_url, resolve_meta
from .models import Idle, ResponseState, SheetReference
from .params import validate
from .utils.config import Settings

logger = logging.getLogger(__name__)


class Orchestrator:

    def __init__(self, settings: Settings):
        # Fail at construction rather than in the middle of a submission
        settings.request_base()
        self.settings = settings
        self.state: ResponseState = Idle()
        self.searching = False
        self._sequence = 0

    def _is_latest(self, seq: int) -> bool:
        return seq == self._sequence

    def _apply(self, seq: int, state: ResponseState) -> None:
        if not self._is_latest(seq):
            logger.info(f"Discarding outcome of superseded submission #{seq}")
            return
        self.state = state

    async def submit(
        self,
        sheet_url: Optional[str],
        offset: Optional[str] = None,
        limit: Optional[str] = None,
        row: Optional[str] = None,
    ) -> ResponseState:
        """Run one submission and return the current state once it settles."""
        # Empty input is a no-op: it must not supersede a submission in flight
        if not has_sheet_url(sheet_url):
            return self.state

        self._sequence += 1
        seq = self._sequence
        self.searching = True
        try:
            self._apply(seq, Idle())
            meta = await resolve_meta(sheet_url, self.settings)
            if not isinstance(meta, SheetReference):
                if meta is not None:
                    self._apply(seq, meta)
                return self.state

            logger.info(f"Resolved {meta.spreadsheet_id} ({meta.selector.kind})")
            outcome = await fetch_data(meta, validate(offset, limit, row), self.settings)
            self._apply(seq, outcome)
            return self.state
        finally:
            if self._is_latest(seq):
                self.searching = False
