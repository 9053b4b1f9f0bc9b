"""Configuration settings for egresswatch."""

from typing import Optional, Set
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_csv(value: Optional[str]) -> Set[str]:
    """Split a comma-separated list into a set of trimmed, non-empty items."""
    if not value:
        return set()
    return {item.strip() for item in value.split(",") if item.strip()}


class ServerSettings(BaseSettings):
    host: str = Field("0.0.0.0", validation_alias="EGRESSWATCH_HOST")
    port: int = Field(8092, validation_alias="EGRESSWATCH_PORT")

class DatabaseSettings(BaseSettings):
    # Full SQLAlchemy URL; when set the discrete fields below are ignored
    url: Optional[str] = Field(None, validation_alias="EGRESSWATCH_DB_URL")
    host: str = Field("127.0.0.1", validation_alias="EGRESSWATCH_DB_HOST")
    port: int = Field(3306, validation_alias="EGRESSWATCH_DB_PORT")
    username: str = Field("root", validation_alias="EGRESSWATCH_DB_USERNAME")
    password: str = Field("", validation_alias="EGRESSWATCH_DB_PASSWORD")
    database: str = Field("egresswatch", validation_alias="EGRESSWATCH_DB_DATABASE")
    timeout: int = Field(5, validation_alias="EGRESSWATCH_DB_TIMEOUT")

    def sqlalchemy_url(self) -> str:
        if self.url:
            return self.url
        return (
            f"mysql+pymysql://{self.username}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

class DispatchSettings(BaseSettings):
    enabled: bool = Field(True, validation_alias="EGRESSWATCH_GHA_DISPATCH_ENABLED")
    token: str = Field("", validation_alias="EGRESSWATCH_GHA_TOKEN")
    host: str = Field("api.github.com", validation_alias="EGRESSWATCH_GHA_URL")
    owner: str = Field("", validation_alias="EGRESSWATCH_GHA_OWNER")
    repo: str = Field("", validation_alias="EGRESSWATCH_GHA_REPO")
    event_type: str = Field("receiveNewIntents", validation_alias="EGRESSWATCH_GHA_EVENT_TYPE")
    timeout: float = Field(10, validation_alias="EGRESSWATCH_GHA_TIMEOUT")

class StoreSettings(BaseSettings):
    client_ignore_list_by_name: str = Field(
        "coredns", validation_alias="EGRESSWATCH_CLIENT_IGNORE_LIST_BY_NAME"
    )
    client_ignore_list_by_namespace: str = Field(
        "", validation_alias="EGRESSWATCH_CLIENT_IGNORE_LIST_BY_NAMESPACE"
    )
    retention_days: int = Field(90, validation_alias="EGRESSWATCH_RETENTION_DAYS")

    @property
    def ignored_names(self) -> Set[str]:
        return parse_csv(self.client_ignore_list_by_name)

    @property
    def ignored_namespaces(self) -> Set[str]:
        return parse_csv(self.client_ignore_list_by_namespace)

class Settings(BaseSettings):
    """Global Application Settings."""
    server: ServerSettings = ServerSettings()
    db: DatabaseSettings = DatabaseSettings()
    dispatch: DispatchSettings = DispatchSettings()
    store: StoreSettings = StoreSettings()

    # Global
    cluster: str = Field("cluster.local", validation_alias="EGRESSWATCH_CLUSTER")
    log_level: str = Field("INFO", validation_alias="EGRESSWATCH_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore"
    )

settings = Settings()
