"""Configuration models and YAML loader for the automation primitives."""

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.core.schemas import Platform

# --- Generic selector chains (most specific platform chains live in the catalog) ---

DEFAULT_APPLY_BUTTON_SELECTORS: tuple[str, ...] = (
    'button[aria-label*="apply" i]',
    'button[class*="apply" i]',
    'a[class*="apply" i]',
    'input[value*="apply" i]',
)

DEFAULT_JOB_TITLE_SELECTORS: tuple[str, ...] = (
    "h1",
    ".job-title",
    '[data-testid="job-title"]',
    ".jobsearch-JobInfoHeader-title",
)

DEFAULT_COMPANY_NAME_SELECTORS: tuple[str, ...] = (
    ".company",
    ".company-name",
    '[data-testid="company-name"]',
    ".jobsearch-InlineCompanyRating",
)


class DelayRange(BaseModel):
    """Millisecond bounds for a randomized human-paced delay."""

    model_config = ConfigDict(frozen=True)

    min_ms: int = Field(ge=0)
    max_ms: int = Field(ge=0)

    @model_validator(mode="after")
    def min_not_above_max(self) -> "DelayRange":
        if self.min_ms > self.max_ms:
            msg = f"min_ms ({self.min_ms}) must not exceed max_ms ({self.max_ms})"
            raise ValueError(msg)
        return self


class PlatformDelays(BaseModel):
    """Pacing ranges consumed by the orchestrator."""

    model_config = ConfigDict(frozen=True)

    between_applications: DelayRange = DelayRange(min_ms=3000, max_ms=8000)
    between_pages: DelayRange = DelayRange(min_ms=2000, max_ms=5000)
    form_filling: DelayRange = DelayRange(min_ms=500, max_ms=1500)
    page_load: DelayRange = DelayRange(min_ms=2000, max_ms=10000)


class PlatformSelectors(BaseModel):
    """Selector chains for one platform. Order matters: first match wins."""

    model_config = ConfigDict(frozen=True)

    apply_button: tuple[str, ...] = DEFAULT_APPLY_BUTTON_SELECTORS
    job_title: tuple[str, ...] = DEFAULT_JOB_TITLE_SELECTORS
    company_name: tuple[str, ...] = DEFAULT_COMPANY_NAME_SELECTORS
    form: tuple[str, ...] = ()


class UrlRules(BaseModel):
    """URL shape and extraction patterns for one platform.

    ``job_id_patterns`` and ``company_patterns`` are tried in order; the
    first non-empty capture group wins.
    """

    model_config = ConfigDict(frozen=True)

    domains: tuple[str, ...] = ()
    url_pattern: str | None = None
    search_link_pattern: str | None = None
    job_id_patterns: tuple[str, ...] = ()
    company_patterns: tuple[str, ...] = ()
    company_excludes: tuple[str, ...] = ()

    @field_validator("url_pattern", "search_link_pattern")
    @classmethod
    def pattern_compiles(cls, v: str | None) -> str | None:
        if v is not None:
            _check_regex(v)
        return v

    @field_validator("job_id_patterns", "company_patterns")
    @classmethod
    def patterns_compile(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in v:
            _check_regex(pattern)
        return v


class PlatformProfile(BaseModel):
    """Everything the core needs to know about one platform, as data."""

    model_config = ConfigDict(frozen=True)

    platform: Platform
    selectors: PlatformSelectors = Field(default_factory=PlatformSelectors)
    delays: PlatformDelays = Field(default_factory=PlatformDelays)
    urls: UrlRules = Field(default_factory=UrlRules)


class BrowserConfig(BaseModel):
    """Browser session configuration."""

    cookies_path: str = "config/cookies.json"
    timeout_ms: int = Field(default=30000, ge=1000)


class WaitConfig(BaseModel):
    """Default timeouts for element and form waits."""

    element_timeout_ms: int = Field(default=10000, ge=0)
    form_timeout_ms: int = Field(default=5000, ge=0)


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    waits: WaitConfig = Field(default_factory=WaitConfig)
    platforms: dict[Platform, PlatformProfile] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def fill_platform_tags(cls, data: Any) -> Any:
        """Allow YAML entries to omit ``platform:`` under their own key.

        Each entry is layered over the built-in profile section by section,
        so overriding ``selectors.form`` keeps the platform's URL rules.
        """
        if isinstance(data, dict) and isinstance(data.get("platforms"), dict):
            platforms: dict[str, Any] = {}
            for key, profile in data["platforms"].items():
                if isinstance(profile, dict):
                    profile = _merge_over_builtin(key, profile)
                platforms[key] = profile
            data = {**data, "platforms": platforms}
        return data

    def profile_for(self, platform: Platform) -> PlatformProfile:
        """Return the configured profile, or the built-in one."""
        from src.platforms.catalog import get_profile

        configured = self.platforms.get(platform)
        if configured is not None:
            return configured
        return get_profile(platform)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)


def _check_regex(pattern: str) -> None:
    try:
        re.compile(pattern)
    except re.error as e:
        msg = f"invalid pattern {pattern!r}: {e}"
        raise ValueError(msg) from e


def _merge_over_builtin(key: Any, override: dict[str, Any]) -> dict[str, Any]:
    from src.platforms.catalog import BUILTIN_PROFILES

    try:
        builtin = BUILTIN_PROFILES.get(Platform(key))
    except ValueError:
        # Unknown key; the dict key validation reports it.
        builtin = None
    merged: dict[str, Any] = {"platform": key}
    if builtin is not None:
        merged.update(builtin.model_dump(exclude={"platform"}))
    for section, value in override.items():
        base = merged.get(section)
        if isinstance(base, dict) and isinstance(value, dict):
            merged[section] = {**base, **value}
        else:
            merged[section] = value
    return merged
