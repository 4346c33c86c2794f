import pytest

from playground.utils.config import Settings


@pytest.fixture
def settings():
    """Settings with an absolute API server and no .env lookup."""
    return Settings(SERVER_URL="http://api.test", _env_file=None)


@pytest.fixture
def same_origin_settings():
    return Settings(SERVER_URL=None, PUBLIC_ORIGIN="https://playground.test", _env_file=None)


@pytest.fixture
def sheet1_meta_body():
    return {
        "data": {
            "sheet_id_or_name": {"tab_sheet_id": None, "tab_sheet_name": "Sheet1"},
            "spread_sheet_id": "abc",
        }
    }
