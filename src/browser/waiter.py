"""Element wait service: resolve once a selector matches, or give up.

The wait is mutation-driven, not polled: a single-shot MutationObserver is
installed in the page and races a timer. Whichever fires first disconnects
the observer and clears the timer. The result is always an element or
``None``; the wait never raises.

An optional ``asyncio.Event`` lets the caller abandon the wait early (for
example when automation is paused). Each in-page wait registers a release
hook under ``window.__applyCoreWaits[token]`` so cancellation also tears
down the observer.
"""

import asyncio
import logging
import uuid
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10000

# Extra time allowed for the page to answer before Python gives up on it.
BACKSTOP_GRACE_S = 0.5

_WAIT_JS = """
([selector, timeoutMs, token]) => new Promise((resolve) => {
    const registry = (window.__applyCoreWaits = window.__applyCoreWaits || {});
    let timer = null;
    let observer = null;
    const finish = (value) => {
        if (observer) observer.disconnect();
        if (timer !== null) clearTimeout(timer);
        delete registry[token];
        resolve(value);
    };
    const existing = document.querySelector(selector);
    if (existing) {
        finish(existing);
        return;
    }
    observer = new MutationObserver(() => {
        const found = document.querySelector(selector);
        if (found) finish(found);
    });
    registry[token] = () => finish(null);
    observer.observe(document, { childList: true, subtree: true, attributes: true });
    timer = setTimeout(() => finish(null), timeoutMs);
})
"""

_RELEASE_JS = """
(token) => {
    const registry = window.__applyCoreWaits;
    if (registry && registry[token]) registry[token]();
}
"""


async def wait_for(
    page: Any,
    selector: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    cancel: asyncio.Event | None = None,
    log: logging.Logger | None = None,
) -> Any | None:
    """Wait until ``selector`` matches an element in the page.

    Args:
        page: patchright Page (or mock).
        selector: CSS selector to wait for.
        timeout_ms: Give up after this many milliseconds.
        cancel: Optional event; setting it ends the wait with ``None``.
        log: Optional logger to report to; defaults to this module's logger.

    Returns:
        The first matching ElementHandle, or ``None`` on timeout,
        cancellation or any error.
    """
    log = log or logger
    try:
        existing = await page.query_selector(selector)
    except Exception:
        log.warning("Cannot query '%s' — giving up wait", selector, exc_info=True)
        return None
    if existing is not None:
        return existing
    if cancel is not None and cancel.is_set():
        return None

    token = uuid.uuid4().hex
    waiter = asyncio.ensure_future(
        page.evaluate_handle(_WAIT_JS, [selector, max(timeout_ms, 0), token]),
    )
    pending: set[asyncio.Future[Any]] = {waiter}
    canceller: asyncio.Future[Any] | None = None
    if cancel is not None:
        canceller = asyncio.ensure_future(cancel.wait())
        pending.add(canceller)

    try:
        done, _ = await asyncio.wait(
            pending,
            timeout=max(timeout_ms, 0) / 1000 + BACKSTOP_GRACE_S,
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        if canceller is not None:
            canceller.cancel()

    if waiter not in done:
        waiter.cancel()
        await _release(page, token, log)
        if cancel is not None and cancel.is_set():
            log.debug("Wait for '%s' cancelled", selector)
        else:
            log.debug("Page did not answer wait for '%s' — giving up", selector)
        return None

    try:
        handle = waiter.result()
        element = handle.as_element()
    except Exception:
        log.debug("Wait for '%s' failed", selector, exc_info=True)
        return None

    if element is None:
        log.debug("No element matched '%s' within %d ms", selector, timeout_ms)
        await _dispose(handle)
    return element


async def wait_for_any(
    page: Any,
    selectors: tuple[str, ...],
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    cancel: asyncio.Event | None = None,
    log: logging.Logger | None = None,
) -> Any | None:
    """Wait for any selector of a chain, then return the first chain entry that matches.

    Chain order is preserved: once something has rendered, the earliest
    selector in the chain with a match wins.
    """
    log = log or logger
    if not selectors:
        return None
    found = await wait_for(page, ", ".join(selectors), timeout_ms, cancel=cancel, log=log)
    if found is None:
        return None
    for selector in selectors:
        try:
            el = await page.query_selector(selector)
        except Exception:
            log.debug("Selector '%s' raised, trying next", selector, exc_info=True)
            continue
        if el is not None:
            return el
    return found


async def _release(page: Any, token: str, log: logging.Logger) -> None:
    """Disconnect an abandoned in-page observer. Best-effort."""
    try:
        await asyncio.wait_for(page.evaluate(_RELEASE_JS, token), timeout=BACKSTOP_GRACE_S)
    except Exception:
        log.debug("Could not release wait %s", token, exc_info=True)


async def _dispose(handle: Any) -> None:
    try:
        await handle.dispose()
    except Exception:
        logger.debug("Could not dispose handle", exc_info=True)
