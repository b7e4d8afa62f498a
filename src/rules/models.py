from pydantic import BaseModel, Field, field_validator


class PresenceRules(BaseModel):
    target_days: int = Field(default=730, gt=0)
    timezone: str = "America/Toronto"
    country_name: str = "Canada"

    @field_validator("timezone")
    @classmethod
    def timezone_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("timezone must not be blank")
        return value.strip()


class ApiRules(BaseModel):
    title: str = "Presence Tracker API"
    version: str = "1.0.0"
    cors_origins: list[str] = Field(default_factory=list)


class AuthRules(BaseModel):
    token_ttl_minutes: int = Field(default=60 * 24 * 7, gt=0)


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    data_dir_required: bool = False


class Rules(BaseModel):
    presence: PresenceRules = Field(default_factory=PresenceRules)
    api: ApiRules = Field(default_factory=ApiRules)
    auth: AuthRules = Field(default_factory=AuthRules)
    ops: OpsRules = Field(default_factory=OpsRules)
