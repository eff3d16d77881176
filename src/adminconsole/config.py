from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Console configuration loaded from environment variables."""

    api_base_url: str = Field(
        "http://localhost:8080",
        validation_alias=AliasChoices("API_BASE_URL", "API_URL"),
    )
    request_timeout: float = Field(10.0, description="Seconds to wait for the remote service")
    success_ttl: float = Field(3.0, description="Seconds a success notification stays visible")
    error_ttl: float = Field(5.0, description="Seconds an error notification stays visible")
    session_account_id: int = Field(1, description="Account id attributed to the acting session")
    session_email_domain: str = Field("company.com")
    default_project_id: int = Field(1)


settings = Settings()
