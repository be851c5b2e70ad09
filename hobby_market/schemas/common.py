from pydantic import BaseModel, Field

from hobby_market.core.errors import HobbyMarketError, RecordDecodeError


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: list[dict] = Field(default_factory=list)

    @classmethod
    def from_error(cls, exc: HobbyMarketError) -> "ErrorResponse":
        details = exc.errors if isinstance(exc, RecordDecodeError) else []
        return cls(code=exc.code.value, message=exc.message, details=details)
