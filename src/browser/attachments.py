"""Attachment injector: put a fetched document into a native file input.

Steps, each best-effort:
  1. Derive a filesystem-safe display name from the source URL or name.
  2. Wrap the bytes into an AttachmentFile (name, MIME type, mtime).
  3. Build a File in the page, add it to a DataTransfer and assign
     ``dataTransfer.files`` to ``input.files``. Plain assignment of a
     synthetic list is rejected by file inputs.
  4. Replay the events a real pick produces: change, input, focus, pause,
     blur(), a ``blur`` event, pause.

Only step 3 decides the result. Event replay failures are logged and
ignored.
"""

import asyncio
import base64
import logging
import re
import time
from typing import Any
from urllib.parse import unquote, urlsplit

from src.core.schemas import AttachmentFile

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".pdf"
DEFAULT_MIME_TYPE = "application/pdf"

MIME_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

DEFAULT_FILE_INPUT_SELECTORS: tuple[str, ...] = (
    'input[type="file"][name*="resume" i]',
    'input[type="file"][id*="resume" i]',
    'input[type="file"][accept*="pdf" i]',
    'input[type="file"]',
)

# Pauses (seconds) inside the event replay: after focus, after blur.
EVENT_PAUSES_S: tuple[float, float] = (0.05, 0.1)

_ENCODED_RE = re.compile(r"%[0-9A-F]{2}", re.IGNORECASE)
_INVALID_CHARS_RE = re.compile(r"[^\w\s.-]", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")
_EXTENSION_RE = re.compile(r"\.(pdf|docx|doc)$", re.IGNORECASE)
# Separators of query and fragment pieces (`download?file=cv.pdf`).
_QUERY_SPLIT_RE = re.compile(r"[?&=#]")

_SET_FILES_JS = """
(input, file) => {
    const bytes = Uint8Array.from(atob(file.data), (c) => c.charCodeAt(0));
    const blob = new File([bytes], file.name, {
        type: file.mimeType,
        lastModified: file.lastModified,
    });
    const transfer = new DataTransfer();
    transfer.items.add(blob);
    input.files = transfer.files;
    return input.files ? input.files.length : 0;
}
"""

_DISPATCH_JS = "(input, type) => input.dispatchEvent(new Event(type, { bubbles: true }))"
_FOCUS_JS = "(input) => input.focus()"
_BLUR_JS = "(input) => input.blur()"


def derive_filename(source: str | None, *, now_ms: int | None = None) -> str:
    """Turn a URL or file name into a clean upload file name.

    ``"https://host/files/My%20Resume%20(final).pdf"`` becomes
    ``"My_Resume_final.pdf"``. The result always ends in .pdf, .doc or
    .docx; when nothing usable remains, ``resume_<epoch ms>.pdf``.
    """
    fallback = f"resume_{now_ms if now_ms is not None else _now_ms()}{DEFAULT_EXTENSION}"
    if not source:
        return fallback
    try:
        decoded = unquote(source.strip())
        name = _last_segment(decoded)

        if not name or "." not in name or "%" in name:
            for part in reversed(decoded.split("/")):
                tokens = [t for t in _QUERY_SPLIT_RE.split(part) if _names_document(t)]
                if tokens:
                    name = tokens[-1]
                    break

        if not name or "." not in name:
            return fallback

        name = _ENCODED_RE.sub("", name)
        name = _INVALID_CHARS_RE.sub("", name)
        name = _WHITESPACE_RE.sub("_", name.strip()).strip("_")

        match = _EXTENSION_RE.search(name)
        if match:
            name = name[: match.start()] + match.group(0).lower()
        else:
            name += DEFAULT_EXTENSION

        stem = name.rsplit(".", 1)[0]
        if not stem.strip("._-"):
            return fallback
        return name
    except Exception:
        logger.debug("Could not derive filename from '%s'", source, exc_info=True)
        return fallback


def guess_mime_type(filename: str) -> str:
    """MIME type for an accepted extension, PDF otherwise."""
    match = _EXTENSION_RE.search(filename)
    if match is None:
        return DEFAULT_MIME_TYPE
    return MIME_TYPES[f".{match.group(1).lower()}"]


def build_attachment(
    data: bytes,
    source: str | None,
    mime_type: str | None = None,
) -> AttachmentFile:
    """Build a fresh AttachmentFile for one upload attempt."""
    name = derive_filename(source)
    return AttachmentFile(
        name=name,
        mime_type=mime_type or guess_mime_type(name),
        data=data,
        last_modified=_now_ms(),
    )


async def find_file_input(
    scope: Any,
    selectors: tuple[str, ...] = DEFAULT_FILE_INPUT_SELECTORS,
    *,
    log: logging.Logger | None = None,
) -> Any | None:
    """Return the first file input in a page or form, or None.

    Visibility is not required: upload widgets usually hide the native input.
    """
    log = log or logger
    for selector in selectors:
        try:
            el = await scope.query_selector(selector)
        except Exception:
            log.debug("Selector '%s' raised, trying next", selector, exc_info=True)
            continue
        if el is not None:
            return el
    return None


async def attach(
    file_input: Any,
    data: bytes,
    source: str | None,
    *,
    mime_type: str | None = None,
    log: logging.Logger | None = None,
) -> bool:
    """Attach a document to a file input as if picked by the user.

    Args:
        file_input: ElementHandle of an ``<input type="file">``.
        data: Raw document bytes.
        source: URL or file name the bytes came from (used for the name).
        mime_type: MIME type reported by the source, if known.
        log: Optional logger to report to; defaults to this module's logger.

    Returns:
        True once the input's files list holds the document, False otherwise.
    """
    log = log or logger
    if file_input is None:
        log.warning("No file input to attach to")
        return False

    try:
        attachment = build_attachment(data, source, mime_type)
    except Exception:
        log.warning("Could not build attachment from '%s'", source, exc_info=True)
        return False

    if not await set_files(file_input, attachment, log=log):
        return False

    await replay_file_events(file_input, log=log)
    log.info("Attached %s (%d bytes)", attachment.name, attachment.size)
    return True


async def set_files(
    file_input: Any,
    attachment: AttachmentFile,
    *,
    log: logging.Logger | None = None,
) -> bool:
    """Assign the attachment to ``input.files`` through a DataTransfer."""
    log = log or logger
    payload = {
        "name": attachment.name,
        "mimeType": attachment.mime_type,
        "lastModified": attachment.last_modified,
        "data": base64.b64encode(attachment.data).decode("ascii"),
    }
    try:
        count = await file_input.evaluate(_SET_FILES_JS, payload)
    except Exception:
        log.warning("Setting files on input failed", exc_info=True)
        return False
    if not count:
        log.warning("File input did not accept %s", attachment.name)
        return False
    return True


async def replay_file_events(
    file_input: Any,
    *,
    log: logging.Logger | None = None,
    pauses_s: tuple[float, float] = EVENT_PAUSES_S,
) -> None:
    """Dispatch change, input, focus, pause, blur, blur event, pause. Never raises."""
    log = log or logger
    focus_pause, settle_pause = pauses_s
    steps: tuple[tuple[str, str, Any], ...] = (
        ("change", _DISPATCH_JS, "change"),
        ("input", _DISPATCH_JS, "input"),
        ("focus", _FOCUS_JS, None),
        ("pause", "", focus_pause),
        ("blur()", _BLUR_JS, None),
        ("blur", _DISPATCH_JS, "blur"),
        ("pause", "", settle_pause),
    )
    for label, script, arg in steps:
        try:
            if label == "pause":
                await asyncio.sleep(arg)
            elif arg is None:
                await file_input.evaluate(script)
            else:
                await file_input.evaluate(script, arg)
        except Exception as e:
            log.warning("File event step '%s' failed: %s", label, e)


def _last_segment(decoded: str) -> str:
    try:
        path = urlsplit(decoded).path
    except ValueError:
        path = decoded
    return path.rstrip("/").split("/")[-1]


def _names_document(token: str) -> bool:
    lowered = token.lower()
    return ".pdf" in lowered or ".doc" in lowered


def _now_ms() -> int:
    return int(time.time() * 1000)
