"""
KYC document handling -- which documents each user type needs, upload
validation, local storage and the status summary shown on /auth/documents.
"""

from __future__ import annotations

import logging
import os
import time
import uuid
from dataclasses import dataclass
from typing import Iterable

import config_env

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = ("application/pdf", "image/jpeg", "image/jpg", "image/png")

VALID_DOCUMENTS = {
    "entrepreneur": ("business_registration", "pitch_deck", "passport", "driving_license", "national_id"),
    "investor": ("proof_of_funds", "intent_letter", "passport", "driving_license", "national_id"),
    "both": (
        "business_registration", "pitch_deck", "proof_of_funds", "intent_letter",
        "passport", "driving_license", "national_id",
    ),
}


class DocumentError(ValueError):
    """Rejected upload (wrong type, too large, not allowed for the user type)."""


@dataclass(frozen=True)
class RequiredDocument:
    type: str
    name: str
    required: bool

    def as_dict(self) -> dict:
        return {"type": self.type, "name": self.name, "required": self.required}


_BUSINESS_REGISTRATION = "business_registration", "Business Registration"
_PITCH_DECK = "pitch_deck", "Pitch Deck"
_PROOF_OF_FUNDS = "proof_of_funds", "Proof of Funds"
_INTENT_LETTER = "intent_letter", "Intent Letter"
_PASSPORT = "passport", "Passport/ID"

REQUIRED_DOCUMENTS = {
    "entrepreneur": (
        RequiredDocument(*_BUSINESS_REGISTRATION, True),
        RequiredDocument(*_PITCH_DECK, True),
        RequiredDocument(*_PASSPORT, True),
    ),
    "investor": (
        RequiredDocument(*_PROOF_OF_FUNDS, True),
        RequiredDocument(*_INTENT_LETTER, True),
        RequiredDocument(*_PASSPORT, True),
    ),
    # founders who also invest only *must* prove funds
    "both": (
        RequiredDocument(*_BUSINESS_REGISTRATION, False),
        RequiredDocument(*_PITCH_DECK, False),
        RequiredDocument(*_PROOF_OF_FUNDS, True),
        RequiredDocument(*_INTENT_LETTER, True),
        RequiredDocument(*_PASSPORT, True),
    ),
}


def required_documents(user_type: str) -> tuple[RequiredDocument, ...]:
    return REQUIRED_DOCUMENTS.get(user_type, ())


def is_valid_document_type(user_type: str, document_type: str) -> bool:
    return document_type in VALID_DOCUMENTS.get(user_type, ())


def validate_upload(
    user_type: str,
    document_type: str,
    content_type: str | None,
    size: int,
    max_mb: float | None = None,
) -> None:
    """Raise DocumentError when the upload must be rejected."""
    max_mb = config_env.MAX_UPLOAD_MB if max_mb is None else max_mb
    if not is_valid_document_type(user_type, document_type):
        raise DocumentError(
            f"Invalid document type: {document_type} for user type: {user_type}"
        )
    if (content_type or "").lower() not in ALLOWED_MIME_TYPES:
        raise DocumentError("Invalid file type. Only PDF, JPG, and PNG files are allowed.")
    if size <= 0:
        raise DocumentError("Uploaded file is empty.")
    if size > max_mb * 1024 * 1024:
        raise DocumentError(f"File too large. Maximum size is {max_mb:g}MB.")


def stored_filename(original_name: str | None) -> str:
    """``<epoch ms>-<uuid><ext>`` so uploads never collide or reuse client names."""
    ext = os.path.splitext(original_name or "")[1].lower()
    return f"{int(time.time() * 1000)}-{uuid.uuid4()}{ext}"


def save_document(data: bytes, original_name: str | None, upload_dir: str | None = None) -> str:
    """Write *data* under *upload_dir* (default UPLOAD_DIR) and return the stored path."""
    upload_dir = upload_dir or config_env.UPLOAD_DIR
    os.makedirs(upload_dir, exist_ok=True)
    path = os.path.join(upload_dir, stored_filename(original_name))
    with open(path, "wb") as f:
        f.write(data)
    logger.info("Stored KYC document %s (%d bytes)", path, len(data))
    return path


def delete_document(path: str) -> bool:
    try:
        os.remove(path)
        return True
    except OSError as e:
        logger.warning("Could not delete document %s: %s", path, e)
        return False


def status_summary(documents: Iterable, user_type: str) -> dict:
    """
    Summarise uploaded documents against the requirements of *user_type*.

    *documents* are objects with ``doc_type`` and ``status`` attributes
    (``KycDocument`` rows). ``complete`` means at least as many approved
    documents as there are required ones.
    """
    required = required_documents(user_type)
    documents = list(documents)

    counts = {"pending": 0, "approved": 0, "rejected": 0}
    for doc in documents:
        if doc.status in counts:
            counts[doc.status] += 1

    uploaded_types = {doc.doc_type for doc in documents}
    missing = [
        req.as_dict() for req in required
        if req.required and req.type not in uploaded_types
    ]
    required_count = sum(1 for req in required if req.required)

    return {
        "total": len(required),
        "uploaded": len(documents),
        "pending": counts["pending"],
        "approved": counts["approved"],
        "rejected": counts["rejected"],
        "missing": missing,
        "complete": counts["approved"] >= required_count,
    }
