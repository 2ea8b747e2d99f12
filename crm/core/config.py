from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "crm"

    # ---------------------------------------------------------------------
    # API contract / OpenAPI
    # ---------------------------------------------------------------------

    api_version: str = "1.0.0"
    api_description: str = (
        "CRM API.\n\n"
        "All endpoints except /health and the auth entry points require "
        "`Authorization: Bearer <token>` obtained from /auth/login or /auth/register.\n\n"
        "Business endpoints additionally require the user to have a role assigned by an admin."
    )

    env: str = "local"
    debug: bool = True
    log_level: str = "INFO"

    db_host: str = "127.0.0.1"
    db_port: int = 5432
    db_name: str = "crm"
    db_user: str = "crm"
    db_password: str = "crm"

    # Full SQLAlchemy URL; when set it wins over the db_* parts.
    db_url: str | None = None

    session_ttl_hours: int = 24 * 7

    notifications_limit: int = 20
    publications_limit: int = 50

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return (
            f"postgresql+psycopg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


settings = Settings()
