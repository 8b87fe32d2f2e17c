"""Form discovery: pick the real application form among decoys.

Search order: every selector of the platform chain (all matches, in
document order), then every ``<form>`` on the page. The first candidate that
is visible and holds at least two visible, non-hidden controls wins. Search
boxes and newsletter signups have fewer and are skipped. No match is a
legitimate outcome and returns ``None``.
"""

import logging
from typing import Any

from src.browser.visibility import is_visible
from src.browser.waiter import wait_for_any

logger = logging.getLogger(__name__)

MIN_VISIBLE_CONTROLS = 2

CONTROL_SELECTOR = "input, select, textarea"
GENERIC_FORM_SELECTOR = "form"


async def is_valid_form(form: Any, *, log: logging.Logger | None = None) -> bool:
    """True if the form has at least MIN_VISIBLE_CONTROLS visible, non-hidden controls."""
    log = log or logger
    try:
        controls = await form.query_selector_all(CONTROL_SELECTOR)
        visible = 0
        for control in controls:
            if await _is_hidden_type(control):
                continue
            if await is_visible(control, log=log):
                visible += 1
                if visible >= MIN_VISIBLE_CONTROLS:
                    return True
        return False
    except Exception:
        log.debug("Could not inspect form controls", exc_info=True)
        return False


async def find_form(
    page: Any,
    selectors: tuple[str, ...] = (),
    *,
    log: logging.Logger | None = None,
) -> Any | None:
    """Return the first visible, valid form, platform chain first.

    Args:
        page: patchright Page (or mock).
        selectors: Platform form selector chain, most specific first.
        log: Optional logger to report to; defaults to this module's logger.
    """
    log = log or logger
    for selector in (*selectors, GENERIC_FORM_SELECTOR):
        candidates = await _query_all(page, selector, log)
        for candidate in candidates:
            if await is_visible(candidate, log=log) and await is_valid_form(candidate, log=log):
                log.debug("Application form found with selector '%s'", selector)
                return candidate
    log.info("No qualifying application form on page")
    return None


async def discover_form(
    page: Any,
    selectors: tuple[str, ...] = (),
    timeout_ms: int = 5000,
    *,
    log: logging.Logger | None = None,
) -> Any | None:
    """Wait for a form (or any chain selector) to render, then run find_form."""
    log = log or logger
    rendered = await wait_for_any(
        page, (*selectors, GENERIC_FORM_SELECTOR), timeout_ms, log=log,
    )
    if rendered is None:
        log.debug("Nothing form-like rendered within %d ms", timeout_ms)
    return await find_form(page, selectors, log=log)


async def _query_all(page: Any, selector: str, log: logging.Logger) -> list[Any]:
    try:
        return list(await page.query_selector_all(selector))
    except Exception:
        log.debug("Selector '%s' raised, trying next", selector, exc_info=True)
        return []


async def _is_hidden_type(control: Any) -> bool:
    kind = await control.get_attribute("type")
    return (kind or "").strip().lower() == "hidden"
