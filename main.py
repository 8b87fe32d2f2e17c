"""CLI entry point for the job-application browser primitives."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from src.core.config import Settings
from src.core.schemas import Platform
from src.platforms.identity import (
    detect_platform,
    extract_identity,
    is_job_link,
    matches_platform,
    normalize,
)

PLATFORM_CHOICES = [p.value for p in Platform]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Job-application browser primitives - identify postings and probe forms",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- identify subcommand ---
    identify_parser = subparsers.add_parser(
        "identify",
        help="Normalize a posting URL and extract its job id / company",
    )
    identify_parser.add_argument("url", help="Job posting URL")
    identify_parser.add_argument(
        "--platform",
        choices=PLATFORM_CHOICES,
        help="Platform tag (default: detected from the URL's domain)",
    )
    identify_parser.add_argument(
        "--config",
        help="Path to settings YAML file (default: built-in platform tables)",
    )
    identify_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    # --- probe subcommand ---
    probe_parser = subparsers.add_parser(
        "probe",
        help="Open a posting, locate its application form and optionally attach a resume",
    )
    probe_parser.add_argument("url", help="Job posting or application URL")
    probe_parser.add_argument(
        "--platform",
        choices=PLATFORM_CHOICES,
        help="Platform tag (default: detected from the URL's domain)",
    )
    probe_parser.add_argument(
        "--resume",
        help="Resume file to attach to the form's first file input",
    )
    probe_parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    probe_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def load_settings(path: str | None) -> Settings:
    """Settings from YAML, or defaults when no path is given."""
    if path is None:
        return Settings()
    return Settings.from_yaml(path)


def resolve_platform(url: str, tag: str | None) -> Platform | None:
    if tag is not None:
        return Platform(tag)
    return detect_platform(url)


def identify(url: str, platform: Platform | None, settings: Settings) -> dict[str, object]:
    """Build the identity report printed by ``identify``."""
    report: dict[str, object] = {
        "platform": platform.value if platform else None,
        "normalized_url": normalize(url),
    }
    if platform is None:
        report.update({"matches": False, "job_link": False, "job_id": None, "company": None})
        return report

    profile = settings.profile_for(platform)
    identity = extract_identity(url, platform, profile)
    report.update(
        {
            "matches": matches_platform(url, platform, profile),
            "job_link": is_job_link(url, platform, profile),
            "job_id": identity.job_id,
            "company": identity.company,
        },
    )
    return report


async def probe(
    url: str,
    platform: Platform | None,
    settings: Settings,
    resume: Path | None,
) -> dict[str, object]:
    """Open the URL in a real browser, find the form and optionally attach a resume."""
    from src.browser.attachments import attach, find_file_input
    from src.browser.forms import discover_form
    from src.browser.session import BrowserSession
    from src.core.config import PlatformDelays

    if platform is not None:
        profile = settings.profile_for(platform)
        form_selectors, delays = profile.selectors.form, profile.delays
    else:
        form_selectors, delays = (), PlatformDelays()

    report: dict[str, object] = {"url": url, "form_found": False, "attached": None}

    async with BrowserSession(settings.browser) as session:
        page = await session.open(url, delays.page_load)
        form = await discover_form(page, form_selectors, settings.waits.form_timeout_ms)
        report["form_found"] = form is not None

        if resume is not None:
            file_input = await find_file_input(form if form is not None else page)
            report["attached"] = await attach(file_input, resume.read_bytes(), resume.name)

    return report


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    platform = resolve_platform(args.url, args.platform)

    if args.command == "identify":
        print(json.dumps(identify(args.url, platform, settings), indent=2))
        return

    resume = Path(args.resume) if args.resume else None
    if resume is not None and not resume.is_file():
        print(f"Error: resume file not found: {resume}", file=sys.stderr)
        sys.exit(1)

    report = asyncio.run(probe(args.url, platform, settings, resume))
    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
