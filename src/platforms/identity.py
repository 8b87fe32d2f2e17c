"""Platform identity resolver: URL normalization and job id / company extraction.

Pure functions, zero browser dependency. None of them raise: a URL that does
not fit its platform's shape degrades to a synthetic ``job-<epoch ms>`` id
and ``company=None``.
"""

import logging
import re
import time
from urllib.parse import quote, urlsplit

from src.core.config import PlatformProfile, UrlRules
from src.core.schemas import ExtractedIdentity, Platform
from src.platforms.catalog import BUILTIN_PROFILES, get_profile

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_DEFAULT_PORTS = {"http": 80, "https": 443}
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"


def normalize(url: str) -> str:
    """Return lower-cased ``origin + path`` without trailing slashes.

    Only meant for equality checks between visits of the same posting.
    Characters that are not legal in a path (spaces included) are
    percent-encoded, so the result normalizes to itself.
    Falls back to a plain lower/strip of the input when it cannot be parsed.
    """
    if not url:
        return ""
    try:
        candidate = url.strip()
        if not _SCHEME_RE.match(candidate):
            candidate = f"https://{candidate}"
        parts = urlsplit(candidate)
        hostname = (parts.hostname or "").strip()
        if not hostname:
            msg = f"no host in {url!r}"
            raise ValueError(msg)
        host = f"[{hostname}]" if ":" in hostname else hostname
        origin = f"{parts.scheme}://{host}"
        port = parts.port
        if port is not None and port != _DEFAULT_PORTS.get(parts.scheme.lower()):
            origin = f"{origin}:{port}"
        path = quote(parts.path, safe=_PATH_SAFE)
        return f"{origin}{path}".lower().rstrip("/")
    except ValueError:
        logger.debug("Could not parse URL '%s', using raw form", url)
        return url.lower().strip()


def same_posting(url_a: str, url_b: str) -> bool:
    """True when two URLs normalize to the same posting address."""
    return normalize(url_a) == normalize(url_b)


def matches_platform(
    url: str, platform: Platform | str, profile: PlatformProfile | None = None,
) -> bool:
    """Test a URL against the platform's structural pattern."""
    rules = _rules(platform, profile)
    if rules is None or rules.url_pattern is None:
        return False
    return re.search(rules.url_pattern, url or "") is not None


def is_job_link(
    url: str, platform: Platform | str, profile: PlatformProfile | None = None,
) -> bool:
    """Test a link found on a search page against the platform's job-link shape."""
    rules = _rules(platform, profile)
    if rules is None or rules.search_link_pattern is None:
        return False
    return re.search(rules.search_link_pattern, url or "") is not None


def is_platform_domain(
    url: str, platform: Platform | str, profile: PlatformProfile | None = None,
) -> bool:
    """True when the URL's host is one of the platform's domains (or a sub-domain)."""
    rules = _rules(platform, profile)
    if rules is None:
        return False
    host = _hostname(url)
    if not host:
        return False
    return any(host == domain or host.endswith(f".{domain}") for domain in rules.domains)


def detect_platform(url: str) -> Platform | None:
    """Return the first built-in platform whose domain list covers the URL."""
    for platform, profile in BUILTIN_PROFILES.items():
        if is_platform_domain(url, platform, profile):
            return platform
    return None


def extract_job_id(
    url: str, platform: Platform | str, profile: PlatformProfile | None = None,
) -> str:
    """Extract the platform job id, or a synthetic ``job-<epoch ms>`` id."""
    rules = _rules(platform, profile)
    if rules is not None and url:
        job_id = _first_capture(url, rules.job_id_patterns)
        if job_id:
            return job_id
    logger.debug("No job id in '%s' for %s — using synthetic id", url, platform)
    return synthetic_job_id()


def extract_company(
    url: str, platform: Platform | str, profile: PlatformProfile | None = None,
) -> str | None:
    """Extract a display company name from the URL, or None."""
    rules = _rules(platform, profile)
    if rules is None or not url:
        return None
    for pattern in rules.company_patterns:
        match = re.search(pattern, url)
        if match is None:
            continue
        raw = next((g for g in match.groups() if g), "")
        if not raw or raw.lower() in rules.company_excludes:
            continue
        company = _format_company(raw)
        if company:
            return company
    return None


def extract_identity(
    url: str, platform: Platform | str, profile: PlatformProfile | None = None,
) -> ExtractedIdentity:
    """Extract job id and company together. Never raises."""
    try:
        return ExtractedIdentity(
            job_id=extract_job_id(url, platform, profile),
            company=extract_company(url, platform, profile),
        )
    except Exception:
        logger.debug("Identity extraction failed for '%s'", url, exc_info=True)
        return ExtractedIdentity(job_id=synthetic_job_id(), company=None)


def synthetic_job_id() -> str:
    return f"job-{_now_ms()}"


# --- Private helpers ---


def _now_ms() -> int:
    return int(time.time() * 1000)


def _rules(platform: Platform | str, profile: PlatformProfile | None) -> UrlRules | None:
    if profile is not None:
        return profile.urls
    try:
        return get_profile(platform).urls
    except (KeyError, ValueError):
        logger.warning("Unknown platform '%s'", platform)
        return None


def _first_capture(url: str, patterns: tuple[str, ...]) -> str | None:
    for pattern in patterns:
        match = re.search(pattern, url)
        if match is None:
            continue
        value = next((g for g in match.groups() if g), None)
        if value:
            return value
    return None


def _format_company(raw: str) -> str:
    """'acme-corp' -> 'Acme corp'. Separators become spaces, first letter capitalized."""
    text = re.sub(r"[-_]+", " ", raw).strip()
    return text[:1].upper() + text[1:]


def _hostname(url: str) -> str:
    if not url:
        return ""
    candidate = url.strip()
    if not _SCHEME_RE.match(candidate):
        candidate = f"https://{candidate}"
    try:
        return (urlsplit(candidate).hostname or "").lower()
    except ValueError:
        return ""
