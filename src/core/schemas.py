"""Core data models shared by the browser primitives and platform resolver."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Platform(str, Enum):
    """Supported hiring platforms. Drives which selector/pattern table is used."""

    LINKEDIN = "linkedin"
    INDEED = "indeed"
    RECRUITEE = "recruitee"
    GLASSDOOR = "glassdoor"
    WORKDAY = "workday"
    LEVER = "lever"
    BREEZY = "breezy"
    ASHBY = "ashby"
    GREENHOUSE = "greenhouse"
    WORKABLE = "workable"
    WELLFOUND = "wellfound"
    ZIPRECRUITER = "ziprecruiter"


class ExtractedIdentity(BaseModel):
    """Stable identity of a job posting.

    ``job_id`` is never empty: when nothing can be extracted it holds a
    synthetic ``job-<epoch ms>`` value so dedup always has a key.
    """

    model_config = ConfigDict(frozen=True)

    job_id: str = Field(min_length=1)
    company: str | None = None


class AttachmentFile(BaseModel):
    """In-memory file built for a single attach call."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    mime_type: str
    data: bytes
    last_modified: int

    @property
    def size(self) -> int:
        return len(self.data)
