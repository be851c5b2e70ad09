from typing import Literal

from pydantic import BaseModel, Field

from hobby_market.schemas.hobby import Hobby, HostProfile


ErrorKind = Literal["network", "decode"]


class BrowseState(BaseModel):
    state: Literal["loading", "ready", "error"] = "loading"
    hobbies: list[Hobby] = Field(default_factory=list)
    message: str | None = None
    error_kind: ErrorKind | None = None


class DetailState(BaseModel):
    state: Literal["loading", "ready", "not-found", "error"] = "loading"
    hobby: Hobby | None = None
    host: HostProfile | None = None
    error_kind: ErrorKind | None = None


class PublishStatus(BaseModel):
    type: Literal["idle", "loading", "success", "error"] = "idle"
    message: str | None = None
    hobby_id: str | None = None
