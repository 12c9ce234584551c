"""
Transient models for a single relay request.

  UploadedFile     — the validated file part of the incoming form
  EmailAttachment  — one attachment in the outbound message (base64 content)
  OutboundEmail    — the message sent to the email provider

Nothing here is persisted; every instance lives for one request.
"""

from pydantic import BaseModel


class UploadedFile(BaseModel):
    """A file part that passed presence, size and type checks."""

    filename: str           # may be "" when the client sent no name
    content_type: str       # declared MIME type, "" when absent
    content: bytes
    size: int


class EmailAttachment(BaseModel):
    filename: str
    content: str            # base64-encoded file bytes


class OutboundEmail(BaseModel):
    """
    Email handed to the provider.

    Field names are snake_case here; ``to_payload`` produces the JSON body
    the send-email endpoint expects.
    """

    from_email: str
    to_email: str
    subject: str
    text: str
    attachments: list[EmailAttachment] = []

    def to_payload(self) -> dict:
        return {
            "from": self.from_email,
            "to": self.to_email,
            "subject": self.subject,
            "text": self.text,
            "attachments": [
                {"filename": att.filename, "content": att.content}
                for att in self.attachments
            ],
        }
