"""Ad Event Schemas — telemetry payloads (all fields optional)."""

from pydantic import BaseModel, ConfigDict, Field


class AdEventCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(None, alias="userId", max_length=100)
    browser: str | None = Field(None, max_length=100)
    os: str | None = Field(None, max_length=100)


class AdEventLogged(BaseModel):
    message: str
