"""
Errors the relay turns into plain-text responses.

Each class carries the HTTP status and the short message returned to the
caller:

  OriginDenied          403  Forbidden origin
  MissingFile           400  Missing file
  NotAFileUpload        400  File field must be a file upload
  FileTooLarge          413  File too large
  UnsupportedFileType   415  Unsupported file type
  ProviderSendError     502  Email send failed: <provider text>
"""

from typing import Optional


class UploadRejected(Exception):
    """Base class for every request the relay refuses to forward."""
    status_code = 400

    def __init__(self, message: str, error_code: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code


class OriginDenied(UploadRejected):
    status_code = 403

    def __init__(self):
        super().__init__("Forbidden origin", "origin_denied")


class MissingFile(UploadRejected):
    status_code = 400

    def __init__(self):
        super().__init__("Missing file", "missing_file")


class NotAFileUpload(UploadRejected):
    """The ``file`` field was sent as a plain text value."""
    status_code = 400

    def __init__(self):
        super().__init__("File field must be a file upload", "not_a_file")


class FileTooLarge(UploadRejected):
    status_code = 413

    def __init__(self):
        super().__init__("File too large", "file_too_large")


class UnsupportedFileType(UploadRejected):
    status_code = 415

    def __init__(self):
        super().__init__("Unsupported file type", "unsupported_type")


class ProviderSendError(UploadRejected):
    """The email provider did not accept the message."""
    status_code = 502

    def __init__(self, provider_message: str = "", provider_status: Optional[int] = None):
        super().__init__(f"Email send failed: {provider_message}", "provider_send_failed")
        self.provider_message = provider_message
        self.provider_status = provider_status


class UnreadableForm(Exception):
    """The request body is not a form submission."""
