"""Application settings."""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from scaffold.core.options import (
    Option,
    with_disable_pprof,
    with_disable_prometheus,
    with_disable_swagger,
    with_enable_cors,
    with_enable_rate,
    with_journal_not_found,
)


class Settings(BaseSettings):
    """Settings read from ``SCAFFOLD_*`` environment variables or a .env file."""

    model_config = SettingsConfigDict(env_prefix="SCAFFOLD_", env_file=".env", extra="ignore")

    app_name: str = "api-scaffold"
    app_env: str = "development"
    app_version: str = "1.0.0"
    debug: bool = False

    host: str = "0.0.0.0"
    port: int = 9999
    log_level: str = "INFO"
    log_json: bool = True

    enable_cors: bool = False
    enable_rate: bool = False
    disable_pprof: bool = False
    disable_swagger: bool = False
    disable_prometheus: bool = False
    journal_not_found: bool = False

    rate_limit_per_second: float = 1.0
    rate_limit_burst: int = 100

    def options(self) -> List[Option]:
        """Server options matching the toggles set here."""
        toggles = [
            (self.disable_pprof, with_disable_pprof),
            (self.disable_swagger, with_disable_swagger),
            (self.disable_prometheus, with_disable_prometheus),
            (self.enable_cors, with_enable_cors),
            (self.enable_rate, with_enable_rate),
            (self.journal_not_found, with_journal_not_found),
        ]
        return [make() for enabled, make in toggles if enabled]


settings = Settings()
