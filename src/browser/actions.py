"""Reusable browser actions: human-paced delays and small DOM helpers.

Design rules:
  - All delays randomized within a configured DelayRange.
  - No fixed asyncio.sleep() for pacing except via random_sleep().
  - Helpers never raise; a failed scroll or text read is not worth aborting for.
"""

import asyncio
import logging
import random
from typing import Any

from src.core.config import DelayRange

logger = logging.getLogger(__name__)

_SMOOTH_SCROLL_JS = """
(el) => el.scrollIntoView({ behavior: "smooth", block: "center", inline: "nearest" })
"""
_PLAIN_SCROLL_JS = "(el) => el.scrollIntoView()"


async def random_sleep(min_s: float, max_s: float) -> float:
    """Sleep for a random duration between min_s and max_s seconds.

    Floor enforcement: min_s is always respected as the absolute minimum.
    If max_s < min_s, max_s is raised to min_s.

    Returns the actual sleep duration (useful for testing).
    """
    floor = max(min_s, 0.0)
    ceiling = max(max_s, floor)
    duration = random.uniform(floor, ceiling)
    await asyncio.sleep(duration)
    return duration


def sample_delay_ms(delay: DelayRange) -> int:
    """Pick a delay in milliseconds, uniformly within the range (inclusive)."""
    return random.randint(delay.min_ms, delay.max_ms)


async def human_pause(delay: DelayRange) -> float:
    """Sleep for a human-paced delay from the range. Returns seconds slept."""
    duration = await random_sleep(delay.min_ms / 1000, delay.max_ms / 1000)
    logger.debug("Paused %.2fs", duration)
    return duration


async def scroll_to_element(element: Any) -> None:
    """Smooth-scroll an element to the centre of the viewport. Never raises."""
    if element is None:
        return
    try:
        await element.evaluate(_SMOOTH_SCROLL_JS)
    except Exception:
        try:
            await element.evaluate(_PLAIN_SCROLL_JS)
        except Exception:
            logger.debug("Could not scroll element into view", exc_info=True)


async def extract_text(page: Any, selectors: tuple[str, ...]) -> str:
    """Return trimmed text of the first selector that matches, or ""."""
    for selector in selectors:
        try:
            el = await page.query_selector(selector)
            if el is None:
                continue
            text = await el.text_content()
            return text.strip() if text else ""
        except Exception:
            logger.debug("Selector '%s' raised, trying next", selector, exc_info=True)
    return ""
