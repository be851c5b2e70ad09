from pydantic import BaseModel


class SessionUser(BaseModel):
    uid: str
    display_name: str | None = None
    email: str | None = None
    photo_url: str | None = None


class PendingSignIn(BaseModel):
    provider_id: str
    auth_uri: str
    session_id: str


class MeOut(BaseModel):
    uid: str
    display_name: str | None
    email: str | None
    photo_url: str | None
