"""Tests for configuration models and YAML loading."""

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from src.core.config import (
    DEFAULT_APPLY_BUTTON_SELECTORS,
    BrowserConfig,
    DelayRange,
    PlatformDelays,
    PlatformProfile,
    PlatformSelectors,
    Settings,
    UrlRules,
    WaitConfig,
)
from src.core.schemas import Platform
from src.platforms.catalog import BUILTIN_PROFILES, get_profile


class TestDelayRange:
    def test_valid(self) -> None:
        d = DelayRange(min_ms=500, max_ms=1500)
        assert (d.min_ms, d.max_ms) == (500, 1500)

    def test_equal_bounds(self) -> None:
        assert DelayRange(min_ms=0, max_ms=0).max_ms == 0

    def test_min_above_max_rejected(self) -> None:
        with pytest.raises(ValidationError, match="must not exceed"):
            DelayRange(min_ms=5, max_ms=1)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DelayRange(min_ms=-1, max_ms=10)


class TestPlatformDelays:
    def test_defaults(self) -> None:
        d = PlatformDelays()
        assert d.between_applications == DelayRange(min_ms=3000, max_ms=8000)
        assert d.between_pages == DelayRange(min_ms=2000, max_ms=5000)
        assert d.form_filling == DelayRange(min_ms=500, max_ms=1500)
        assert d.page_load == DelayRange(min_ms=2000, max_ms=10000)


class TestPlatformSelectors:
    def test_generic_defaults(self) -> None:
        s = PlatformSelectors()
        assert s.apply_button == DEFAULT_APPLY_BUTTON_SELECTORS
        assert s.job_title[0] == "h1"
        assert s.form == ()

    def test_lists_become_ordered_tuples(self) -> None:
        s = PlatformSelectors(form=["form#a", "form.b"])
        assert s.form == ("form#a", "form.b")


class TestUrlRules:
    def test_invalid_pattern_rejected(self) -> None:
        with pytest.raises(ValidationError, match="invalid pattern"):
            UrlRules(url_pattern="(unclosed")

    def test_invalid_extraction_pattern_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UrlRules(job_id_patterns=(r"/ok/(\d+)", "[bad"))


class TestCatalog:
    def test_every_platform_has_a_profile(self) -> None:
        assert set(BUILTIN_PROFILES) == set(Platform)

    def test_profile_tags_match_keys(self) -> None:
        for platform, profile in BUILTIN_PROFILES.items():
            assert profile.platform == platform

    def test_get_profile_accepts_string(self) -> None:
        assert get_profile("lever").platform == Platform.LEVER

    def test_get_profile_unknown(self) -> None:
        with pytest.raises(ValueError):
            get_profile("myspace")


class TestBrowserAndWaitConfig:
    def test_defaults(self) -> None:
        assert BrowserConfig().timeout_ms == 30000
        assert WaitConfig().element_timeout_ms == 10000
        assert WaitConfig().form_timeout_ms == 5000

    def test_timeout_min(self) -> None:
        with pytest.raises(ValidationError):
            BrowserConfig(timeout_ms=500)


class TestSettings:
    def test_defaults_use_catalog(self) -> None:
        s = Settings()
        assert s.profile_for(Platform.LEVER) is get_profile(Platform.LEVER)

    def test_from_yaml_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "nope.yaml")

    def test_from_yaml_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("")
        assert Settings.from_yaml(path).platforms == {}

    def test_from_yaml_platform_override(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(dedent("""\
            waits:
              form_timeout_ms: 2000
            platforms:
              lever:
                selectors:
                  form: ["form#custom"]
                delays:
                  page_load: {min_ms: 100, max_ms: 200}
                urls:
                  job_id_patterns: ['/p/(\\d+)']
        """))
        s = Settings.from_yaml(path)
        profile = s.profile_for(Platform.LEVER)
        assert isinstance(profile, PlatformProfile)
        assert profile.platform == Platform.LEVER
        assert profile.selectors.form == ("form#custom",)
        assert profile.delays.page_load == DelayRange(min_ms=100, max_ms=200)
        assert profile.delays.between_pages == DelayRange(min_ms=2000, max_ms=5000)
        assert profile.urls.job_id_patterns == (r"/p/(\d+)",)
        assert s.waits.form_timeout_ms == 2000
        # Others still come from the catalog
        assert s.profile_for(Platform.ASHBY) is get_profile(Platform.ASHBY)

    def test_unknown_platform_key_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("platforms:\n  myspace: {}\n")
        with pytest.raises(ValidationError):
            Settings.from_yaml(path)

    def test_bad_delay_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(dedent("""\
            platforms:
              indeed:
                delays:
                  form_filling: {min_ms: 900, max_ms: 100}
        """))
        with pytest.raises(ValidationError):
            Settings.from_yaml(path)

    def test_example_settings_file_loads(self) -> None:
        path = Path(__file__).resolve().parents[2] / "config" / "settings.yaml"
        s = Settings.from_yaml(path)
        assert Platform.RECRUITEE in s.platforms

    def test_partial_override_keeps_builtin_rules(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(dedent("""\
            platforms:
              lever:
                selectors:
                  form: ["form#custom"]
        """))
        profile = Settings.from_yaml(path).profile_for(Platform.LEVER)
        builtin = get_profile(Platform.LEVER)
        assert profile.selectors.form == ("form#custom",)
        assert profile.selectors.apply_button == builtin.selectors.apply_button
        assert profile.urls == builtin.urls
        assert profile.delays == builtin.delays

    def test_example_settings_keep_recruitee_urls(self) -> None:
        path = Path(__file__).resolve().parents[2] / "config" / "settings.yaml"
        profile = Settings.from_yaml(path).profile_for(Platform.RECRUITEE)
        assert profile.urls == get_profile(Platform.RECRUITEE).urls
        assert profile.delays.form_filling == DelayRange(min_ms=500, max_ms=1500)
