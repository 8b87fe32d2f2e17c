"""Tests for browser actions: pacing delays, scrolling and text extraction."""

import asyncio
from unittest.mock import AsyncMock, patch

from src.browser.actions import (
    extract_text,
    human_pause,
    random_sleep,
    sample_delay_ms,
    scroll_to_element,
)
from src.core.config import DelayRange

# ---------------------------------------------------------------------------
# TestRandomSleep
# ---------------------------------------------------------------------------


class TestRandomSleep:
    """random_sleep: floor enforcement, range, actual sleeping."""

    async def test_returns_duration_in_range(self) -> None:
        with patch.object(asyncio, "sleep", new_callable=AsyncMock):
            duration = await random_sleep(0.0, 0.01)
        assert 0.0 <= duration <= 0.01

    async def test_max_below_min_is_clamped(self) -> None:
        """If max_s < min_s, max_s is raised to min_s."""
        with patch.object(asyncio, "sleep", new_callable=AsyncMock):
            duration = await random_sleep(5.0, 2.0)
        assert duration == 5.0

    async def test_actually_calls_asyncio_sleep(self) -> None:
        with patch.object(asyncio, "sleep", new_callable=AsyncMock) as mock_sleep:
            await random_sleep(0.1, 0.2)
        mock_sleep.assert_called_once()
        slept = mock_sleep.call_args[0][0]
        assert 0.1 <= slept <= 0.2

    async def test_negative_min_clamped_to_zero(self) -> None:
        with patch.object(asyncio, "sleep", new_callable=AsyncMock):
            duration = await random_sleep(-1.0, 0.5)
        assert duration >= 0.0


# ---------------------------------------------------------------------------
# TestTimingScheduler
# ---------------------------------------------------------------------------


class TestTimingScheduler:
    """sample_delay_ms / human_pause: DelayRange in ms, sleeping in seconds."""

    def test_sample_within_range(self) -> None:
        delay = DelayRange(min_ms=500, max_ms=1500)
        for _ in range(50):
            assert 500 <= sample_delay_ms(delay) <= 1500

    def test_sample_fixed_range(self) -> None:
        assert sample_delay_ms(DelayRange(min_ms=250, max_ms=250)) == 250

    async def test_human_pause_converts_to_seconds(self) -> None:
        with patch.object(asyncio, "sleep", new_callable=AsyncMock) as mock_sleep:
            slept = await human_pause(DelayRange(min_ms=1000, max_ms=1000))
        assert slept == 1.0
        mock_sleep.assert_awaited_once_with(1.0)

    async def test_human_pause_within_range(self) -> None:
        with patch.object(asyncio, "sleep", new_callable=AsyncMock):
            slept = await human_pause(DelayRange(min_ms=2000, max_ms=5000))
        assert 2.0 <= slept <= 5.0


# ---------------------------------------------------------------------------
# TestScrollToElement
# ---------------------------------------------------------------------------


class TestScrollToElement:
    async def test_smooth_scroll(self) -> None:
        el = AsyncMock()
        await scroll_to_element(el)
        el.evaluate.assert_awaited_once()
        assert "smooth" in el.evaluate.await_args[0][0]

    async def test_falls_back_to_plain_scroll(self) -> None:
        el = AsyncMock()
        el.evaluate = AsyncMock(side_effect=[Exception("no options support"), None])
        await scroll_to_element(el)
        assert el.evaluate.await_count == 2

    async def test_never_raises(self) -> None:
        el = AsyncMock()
        el.evaluate = AsyncMock(side_effect=Exception("detached"))
        await scroll_to_element(el)

    async def test_none_is_noop(self) -> None:
        await scroll_to_element(None)


# ---------------------------------------------------------------------------
# TestExtractText
# ---------------------------------------------------------------------------


class TestExtractText:
    async def test_first_matching_selector(self) -> None:
        title = AsyncMock()
        title.text_content = AsyncMock(return_value="  Senior Python Engineer \n")

        async def _qs(selector: str) -> AsyncMock | None:
            return title if selector == ".job-title" else None

        page = AsyncMock()
        page.query_selector = AsyncMock(side_effect=_qs)
        assert await extract_text(page, ("h1", ".job-title")) == "Senior Python Engineer"

    async def test_empty_text(self) -> None:
        el = AsyncMock()
        el.text_content = AsyncMock(return_value=None)
        page = AsyncMock()
        page.query_selector = AsyncMock(return_value=el)
        assert await extract_text(page, ("h1",)) == ""

    async def test_no_match(self) -> None:
        page = AsyncMock()
        page.query_selector = AsyncMock(return_value=None)
        assert await extract_text(page, ("h1", ".company")) == ""

    async def test_raising_selector_skipped(self) -> None:
        el = AsyncMock()
        el.text_content = AsyncMock(return_value="Acme")
        page = AsyncMock()
        page.query_selector = AsyncMock(side_effect=[Exception("bad"), el])
        assert await extract_text(page, ("::bad", ".company")) == "Acme"
