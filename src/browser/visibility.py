"""Visibility oracle: is a DOM node genuinely visible to a human?

A node counts as visible when its own computed style and the style of every
ancestor up to the document root show it (display, visibility, opacity), and
its bounding box has a non-zero width and height.

The page only reports raw readings (``_SNAPSHOT_JS``); the decision is made
in Python by :func:`verdict`. Nothing is cached, the DOM can change between
calls. Any failure to read fails open (visible), since a wrong "invisible"
aborts automation while a wrong "visible" costs one extra interaction.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)

_SNAPSHOT_JS = """
(el) => {
    const chain = [];
    let node = el;
    while (node) {
        const style = window.getComputedStyle(node);
        chain.push({
            display: style.display,
            visibility: style.visibility,
            opacity: style.opacity,
        });
        node = node.parentElement;
    }
    const rect = el.getBoundingClientRect();
    return { width: rect.width, height: rect.height, chain };
}
"""


def style_shows(style: dict[str, Any]) -> bool:
    """Check a single computed-style readout."""
    if style.get("display") == "none":
        return False
    if style.get("visibility") == "hidden":
        return False
    opacity = style.get("opacity")
    if opacity is None or opacity == "":
        return True
    return float(opacity) != 0.0


def verdict(snapshot: dict[str, Any]) -> bool:
    """Turn a raw snapshot into a visibility verdict.

    ``snapshot["chain"][0]`` is the node itself, followed by its ancestors.
    Raises on a malformed snapshot; :func:`is_visible` converts that into
    the fail-open default.
    """
    chain = snapshot["chain"]
    if chain and not style_shows(chain[0]):
        return False
    if float(snapshot["width"]) == 0 or float(snapshot["height"]) == 0:
        return False
    return all(style_shows(style) for style in chain[1:])


async def is_visible(element: Any, *, log: logging.Logger | None = None) -> bool:
    """Return True if the element is visible to a user.

    Args:
        element: patchright ElementHandle (or mock). ``None`` is never visible.
        log: Optional logger to report to; defaults to this module's logger.
    """
    log = log or logger
    if element is None:
        return False
    try:
        snapshot = await element.evaluate(_SNAPSHOT_JS)
        return verdict(snapshot)
    except Exception:
        log.debug("Visibility check failed — assuming visible", exc_info=True)
        return True
