from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModelApiSettings(BaseSettings):
    """Remote model API endpoints. The primary URL delivers German names."""

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    vertec_model_url: str = Field(default="")
    vertec_model_url_alt: str = Field(default="")
    vertec_request_timeout: float = Field(default=30.0, gt=0)
    vertec_page_limit: int = Field(default=500, gt=0)

    @field_validator("vertec_model_url", "vertec_model_url_alt")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if v and not v.startswith(("http://", "https://")):
            raise ValueError(f"Model URL must start with http:// or https://: {v}")
        return v

    @property
    def has_alt_variant(self) -> bool:
        return bool(self.vertec_model_url_alt)


class CacheSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    vertec_cache_lifetime_days: int = Field(default=30, ge=1, le=3650)
    vertec_cache_dir: Path = Field(default=Path("~/.cache/vertec-assist"))

    @property
    def cache_dir(self) -> Path:
        return self.vertec_cache_dir.expanduser()


class TranslationSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    vertec_classes_members_path: Path | None = Field(default=None)
    vertec_translations_path: Path | None = Field(default=None)


class Settings(BaseSettings):
    """Composed settings with shortcut property access."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api: ModelApiSettings = Field(default_factory=ModelApiSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    translations: TranslationSettings = Field(default_factory=TranslationSettings)

    @property
    def model_url(self) -> str:
        return self.api.vertec_model_url

    @property
    def model_url_alt(self) -> str:
        return self.api.vertec_model_url_alt

    @property
    def request_timeout(self) -> float:
        return self.api.vertec_request_timeout

    @property
    def cache_lifetime_days(self) -> int:
        return self.cache.vertec_cache_lifetime_days

    @property
    def cache_dir(self) -> Path:
        return self.cache.cache_dir

    @property
    def classes_members_path(self) -> Path | None:
        return self.translations.vertec_classes_members_path

    @property
    def translations_path(self) -> Path | None:
        return self.translations.vertec_translations_path


@lru_cache
def get_settings() -> Settings:
    return Settings()
