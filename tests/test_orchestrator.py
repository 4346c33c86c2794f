"""Tests for the resolve-then-fetch pipeline."""
import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from playground.errors import ConfigurationError, TransportError
from playground.models import Error, Idle, Result, TransportFailure
from playground.orchestrator import Orchestrator
from playground.utils.config import Settings
from playground.utils.http import HttpResponse

SHEET_URL = "https://docs.google.com/spreadsheets/d/abc/edit#gid=0"
META_GET = "playground.extract.sheet_meta.get_json"
DATA_GET = "playground.extract.sheet_data.get_json"


def test_requires_somewhere_to_send_requests():
    with pytest.raises(ConfigurationError):
        Orchestrator(Settings(SERVER_URL="", PUBLIC_ORIGIN=None, _env_file=None))


def test_starts_idle(settings):
    orchestrator = Orchestrator(settings)
    assert orchestrator.state == Idle()
    assert orchestrator.searching is False


@pytest.mark.asyncio
class TestSubmit:

    async def test_empty_url_does_nothing(self, settings):
        orchestrator = Orchestrator(settings)
        with patch(META_GET, new_callable=AsyncMock) as meta_get, \
                patch(DATA_GET, new_callable=AsyncMock) as data_get:
            state = await orchestrator.submit("", offset="0", limit="10", row="")

        assert state == Idle()
        assert orchestrator.searching is False
        meta_get.assert_not_called()
        data_get.assert_not_called()

    async def test_meta_404_stops_pipeline(self, settings):
        orchestrator = Orchestrator(settings)
        with patch(META_GET, new=AsyncMock(return_value=HttpResponse(404, None))), \
                patch(DATA_GET, new_callable=AsyncMock) as data_get:
            state = await orchestrator.submit(SHEET_URL)

        assert state == Error(message="api server not found")
        assert orchestrator.state == state
        data_get.assert_not_called()

    async def test_meta_invalid(self, settings):
        orchestrator = Orchestrator(settings)
        with patch(META_GET, new=AsyncMock(return_value=HttpResponse(400, {"error_message": "bad"}))), \
                patch(DATA_GET, new_callable=AsyncMock) as data_get:
            state = await orchestrator.submit("not a sheet url")

        assert state == Error(message="sheet url is invalid")
        data_get.assert_not_called()

    async def test_full_success(self, settings, sheet1_meta_body):
        orchestrator = Orchestrator(settings)
        rows = [{"name": "alice"}]
        with patch(META_GET, new=AsyncMock(return_value=HttpResponse(200, sheet1_meta_body))), \
                patch(DATA_GET, new=AsyncMock(return_value=HttpResponse(200, rows))) as data_get:
            state = await orchestrator.submit(SHEET_URL, offset="0", limit="10", row="")

        assert data_get.call_args.kwargs["params"] == [("sheet_name", "Sheet1"), ("offset", "0"), ("limit", "10")]
        assert state == Result(
            api_url="http://api.test/sheet/abc?sheet_name=Sheet1&offset=0&limit=10",
            status_code=200,
            body=rows,
        )

    async def test_data_error_is_surfaced_as_result(self, settings, sheet1_meta_body):
        orchestrator = Orchestrator(settings)
        with patch(META_GET, new=AsyncMock(return_value=HttpResponse(200, sheet1_meta_body))), \
                patch(DATA_GET, new=AsyncMock(return_value=HttpResponse(500, {"error": "boom"}))):
            state = await orchestrator.submit(SHEET_URL)

        assert state == Result(api_url="http://api.test/sheet/abc?sheet_name=Sheet1", status_code=500, body={"error": "boom"})

    async def test_meta_transport_failure(self, settings):
        orchestrator = Orchestrator(settings)
        err = TransportError("http://api.test/sheet_meta", OSError("refused"))
        with patch(META_GET, new=AsyncMock(side_effect=err)), \
                patch(DATA_GET, new_callable=AsyncMock) as data_get:
            state = await orchestrator.submit(SHEET_URL)

        assert isinstance(state, TransportFailure)
        assert orchestrator.searching is False
        data_get.assert_not_called()

    async def test_data_transport_failure(self, settings, sheet1_meta_body):
        orchestrator = Orchestrator(settings)
        err = TransportError("http://api.test/sheet/abc", OSError("reset"))
        with patch(META_GET, new=AsyncMock(return_value=HttpResponse(200, sheet1_meta_body))), \
                patch(DATA_GET, new=AsyncMock(side_effect=err)):
            state = await orchestrator.submit(SHEET_URL)

        assert isinstance(state, TransportFailure)

    async def test_state_cleared_while_in_flight(self, settings, sheet1_meta_body):
        orchestrator = Orchestrator(settings)
        orchestrator.state = Error(message="sheet url is invalid")
        seen = []

        async def meta_get(*args, **kwargs):
            seen.append((orchestrator.state, orchestrator.searching))
            return HttpResponse(404, None)

        with patch(META_GET, new=meta_get):
            await orchestrator.submit(SHEET_URL)

        assert seen == [(Idle(), True)]

    async def test_empty_url_keeps_previous_state(self, settings):
        orchestrator = Orchestrator(settings)
        previous = Result(api_url="http://api.test/sheet/abc", status_code=200, body=[])
        orchestrator.state = previous
        with patch(META_GET, new_callable=AsyncMock) as meta_get:
            state = await orchestrator.submit("   ")

        assert state is previous
        meta_get.assert_not_called()

    @pytest.mark.parametrize("meta_resp, data_resp", [
        (HttpResponse(404, None), None),
        (HttpResponse(500, None), None),
        ("ok", HttpResponse(200, [])),
        ("ok", HttpResponse(500, {"error": "boom"})),
    ])
    async def test_searching_flag_only_during_submission(self, settings, sheet1_meta_body, meta_resp, data_resp):
        orchestrator = Orchestrator(settings)
        during = []

        async def meta_get(*args, **kwargs):
            during.append(orchestrator.searching)
            return HttpResponse(200, sheet1_meta_body) if meta_resp == "ok" else meta_resp

        async def data_get(*args, **kwargs):
            during.append(orchestrator.searching)
            return data_resp

        assert orchestrator.searching is False
        with patch(META_GET, new=meta_get), patch(DATA_GET, new=data_get):
            await orchestrator.submit(SHEET_URL, limit="5")

        assert during and all(during)
        assert orchestrator.searching is False

    async def test_latest_submission_wins(self, settings):
        orchestrator = Orchestrator(settings)
        release_first = asyncio.Event()

        def meta_body(spread_sheet_id):
            return {
                "data": {
                    "sheet_id_or_name": {"tab_sheet_id": None, "tab_sheet_name": None},
                    "spread_sheet_id": spread_sheet_id,
                }
            }

        async def meta_get(url, params=None, **kwargs):
            if "first" in params[0][1]:
                await release_first.wait()
                return HttpResponse(200, meta_body("first"))
            return HttpResponse(200, meta_body("second"))

        async def data_get(url, params=None, **kwargs):
            return HttpResponse(200, {"from": url.rsplit("/", 1)[-1]})

        with patch(META_GET, new=meta_get), patch(DATA_GET, new=data_get):
            first = asyncio.create_task(orchestrator.submit("https://sheets.test/first"))
            await asyncio.sleep(0)
            assert orchestrator.searching is True

            second = await orchestrator.submit("https://sheets.test/second")
            assert second.body == {"from": "second"}
            assert orchestrator.searching is False

            release_first.set()
            await first

        assert orchestrator.state.body == {"from": "second"}
        assert orchestrator.searching is False

    async def test_empty_submission_does_not_supersede_running_one(self, settings, sheet1_meta_body):
        orchestrator = Orchestrator(settings)
        release = asyncio.Event()

        async def meta_get(*args, **kwargs):
            await release.wait()
            return HttpResponse(200, sheet1_meta_body)

        with patch(META_GET, new=meta_get), \
                patch(DATA_GET, new=AsyncMock(return_value=HttpResponse(200, [{"name": "alice"}]))):
            running = asyncio.create_task(orchestrator.submit(SHEET_URL))
            await asyncio.sleep(0)

            await orchestrator.submit("")
            assert orchestrator.searching is True

            release.set()
            state = await running

        assert isinstance(state, Result)
        assert orchestrator.state == state
        assert orchestrator.searching is False
