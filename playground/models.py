from typing import Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

QueryPairs = List[Tuple[str, Optional[Union[int, str]]]]


# --- Sheet reference ---

class ByName(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["name"] = "name"
    name: str

    def query_pairs(self) -> QueryPairs:
        return [("sheet_name", self.name)]


class ById(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["id"] = "id"
    id: int

    def query_pairs(self) -> QueryPairs:
        return [("sheet_id", self.id)]


class Unspecified(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["unspecified"] = "unspecified"

    def query_pairs(self) -> QueryPairs:
        return []


SheetSelector = Union[ByName, ById, Unspecified]


class SheetReference(BaseModel):
    """Canonical spreadsheet id plus the tab to read."""

    model_config = ConfigDict(frozen=True)

    spreadsheet_id: str
    selector: SheetSelector = Field(default_factory=Unspecified)


# --- /sheet_meta payload ---

class SheetIdOrName(BaseModel):
    tab_sheet_id: Optional[int] = None
    tab_sheet_name: Optional[str] = None


class SheetMetaData(BaseModel):
    sheet_id_or_name: SheetIdOrName
    spread_sheet_id: str


class SheetMetaResponse(BaseModel):
    data: SheetMetaData

    def to_reference(self) -> SheetReference:
        tab = self.data.sheet_id_or_name
        if tab.tab_sheet_name is not None:
            selector: SheetSelector = ByName(name=tab.tab_sheet_name)
        elif tab.tab_sheet_id is not None:
            selector = ById(id=tab.tab_sheet_id)
        else:
            selector = Unspecified()
        return SheetReference(spreadsheet_id=self.data.spread_sheet_id, selector=selector)


# --- Query parameters ---

class QueryParameters(BaseModel):
    """Validated pagination parameters. None means the key is omitted."""

    model_config = ConfigDict(frozen=True)

    offset: Optional[int] = Field(default=None, ge=0)
    limit: Optional[int] = Field(default=None, ge=0)
    # Opaque to the client; the server reads it as a single row index.
    row: Optional[int] = Field(default=None, ge=0)

    def query_pairs(self) -> QueryPairs:
        return [("offset", self.offset), ("limit", self.limit), ("row", self.row)]


# --- Response state ---

class Idle(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["idle"] = "idle"


class Error(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["error"] = "error"
    message: str


class Result(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["result"] = "result"
    api_url: str
    status_code: int
    body: Any = None


class TransportFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["transport_failure"] = "transport_failure"
    message: str


ResponseState = Union[Idle, Error, Result, TransportFailure]
