"""
Upload validation for the relay.

Checks run in a fixed order and stop at the first failure:

  1. presence  — the form has a ``file`` field and it is a file part
  2. size      — the file does not exceed Settings.max_file_bytes
  3. type      — declared MIME type OR file extension is on the allow-list

Each failure raises an ``upload_relay.errors.UploadRejected`` subclass.
"""

import logging
from typing import Any, Optional

from starlette.datastructures import FormData, UploadFile

from upload_relay.errors import (
    FileTooLarge,
    MissingFile,
    NotAFileUpload,
    UnsupportedFileType,
)
from upload_relay.models.upload import UploadedFile

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset({
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "application/pdf",
})

ALLOWED_EXTENSIONS = (".ppt", ".pptx", ".pdf")


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

def require_file(value: Any) -> UploadFile:
    """
    Return the form value as a file part.

    Raises:
        MissingFile:    the field is absent
        NotAFileUpload: the field is present but is a text value
    """
    if value is None:
        raise MissingFile()
    if not isinstance(value, UploadFile):
        raise NotAFileUpload()
    return value


def extract_note(form: FormData) -> str:
    """The optional ``note`` field; file parts and absent values become ""."""
    note = form.get("note")
    if isinstance(note, str):
        return note
    return ""


def is_allowed_file_type(filename: Optional[str], content_type: Optional[str]) -> bool:
    """True when the declared MIME type or the file name suffix is allowed."""
    if (content_type or "") in ALLOWED_MIME_TYPES:
        return True
    name_lower = (filename or "").lower()
    return any(name_lower.endswith(ext) for ext in ALLOWED_EXTENSIONS)


async def read_upload(file: UploadFile, max_file_bytes: int) -> UploadedFile:
    """
    Read a file part, enforcing the size limit.

    The declared part size is checked before reading; the byte length is
    checked again afterwards in case the size was not known.

    Raises:
        FileTooLarge
    """
    if file.size is not None and file.size > max_file_bytes:
        raise FileTooLarge()

    content = await file.read()

    if len(content) > max_file_bytes:
        raise FileTooLarge()

    return UploadedFile(
        filename=file.filename or "",
        content_type=file.content_type or "",
        content=content,
        size=len(content),
    )


def check_file_type(upload: UploadedFile) -> None:
    """Raises UnsupportedFileType when neither MIME type nor extension match."""
    if not is_allowed_file_type(upload.filename, upload.content_type):
        raise UnsupportedFileType()


async def validate_upload(form: FormData, max_file_bytes: int) -> tuple[UploadedFile, str]:
    """
    Run presence, size and type checks on a parsed form.

    Returns:
        (upload, note) where note is "" when not supplied.

    Raises:
        UploadRejected subclass for the first failing check.
    """
    file = require_file(form.get("file"))
    upload = await read_upload(file, max_file_bytes)
    check_file_type(upload)
    return upload, extract_note(form)
