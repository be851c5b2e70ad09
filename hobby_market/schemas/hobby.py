from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class HobbyRecord(BaseModel):
    """Stored shape of a `hobbies/{id}` document (camelCase field names)."""

    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore")

    title: str
    description: str
    price_per_hour: float = Field(alias="pricePerHour", ge=0)
    host_id: str | None = Field(default=None, alias="hostId")
    is_active: bool = Field(alias="isActive")
    created_at: datetime | None = Field(default=None, alias="createdAt")


class HostRecord(BaseModel):
    """Stored shape of the `users/{uid}` fields the detail view reads."""

    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore")

    name: str | None = None
    email: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")


class Hobby(BaseModel):
    id: str
    title: str
    description: str
    price_per_hour: float
    host_id: str | None = None
    is_active: bool
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, doc_id: str, record: HobbyRecord) -> "Hobby":
        return cls(
            id=doc_id,
            title=record.title,
            description=record.description,
            price_per_hour=record.price_per_hour,
            host_id=record.host_id,
            is_active=record.is_active,
            created_at=record.created_at,
        )


class HostProfile(BaseModel):
    name: str | None = None
    email: str | None = None
    photo_url: str | None = None


class HobbyPublish(BaseModel):
    # Raw form input; validated by services.publish_service before any write
    title: str = ""
    description: str = ""
    price_per_hour: str = ""
