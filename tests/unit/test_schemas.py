"""Tests for core data models."""

import pytest
from pydantic import ValidationError

from src.core.schemas import AttachmentFile, ExtractedIdentity, Platform


class TestPlatform:
    def test_string_values(self) -> None:
        assert Platform("recruitee") is Platform.RECRUITEE
        assert Platform.LEVER == "lever"

    def test_unknown_rejected(self) -> None:
        with pytest.raises(ValueError):
            Platform("myspace")


class TestExtractedIdentity:
    def test_company_optional(self) -> None:
        identity = ExtractedIdentity(job_id="123")
        assert identity.company is None

    def test_empty_job_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ExtractedIdentity(job_id="")

    def test_frozen(self) -> None:
        identity = ExtractedIdentity(job_id="123", company="Acme")
        with pytest.raises(ValidationError):
            identity.job_id = "456"  # type: ignore[misc]


class TestAttachmentFile:
    def test_size(self) -> None:
        att = AttachmentFile(name="cv.pdf", mime_type="application/pdf", data=b"abc", last_modified=1)
        assert att.size == 3

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AttachmentFile(name="", mime_type="application/pdf", data=b"", last_modified=1)
