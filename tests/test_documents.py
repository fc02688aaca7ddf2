import os
from types import SimpleNamespace

import pytest

from services.documents import (
    DocumentError,
    delete_document,
    is_valid_document_type,
    required_documents,
    save_document,
    status_summary,
    stored_filename,
    validate_upload,
)


def doc(doc_type, status="pending"):
    return SimpleNamespace(doc_type=doc_type, status=status)


def test_required_documents_per_user_type():
    assert [d.type for d in required_documents("entrepreneur")] == [
        "business_registration", "pitch_deck", "passport",
    ]
    both = required_documents("both")
    assert sum(d.required for d in both) == 3
    assert required_documents("admin") == ()


def test_document_types_are_scoped_to_user_type():
    assert is_valid_document_type("investor", "proof_of_funds")
    assert not is_valid_document_type("entrepreneur", "proof_of_funds")
    assert is_valid_document_type("both", "pitch_deck")
    assert not is_valid_document_type("nobody", "passport")


def test_validate_upload_accepts_allowed_files():
    validate_upload("investor", "passport", "image/PNG", 2048, max_mb=1)


@pytest.mark.parametrize("args,message", [
    (("investor", "pitch_deck", "application/pdf", 10), "Invalid document type"),
    (("investor", "passport", "text/plain", 10), "Invalid file type"),
    (("investor", "passport", None, 10), "Invalid file type"),
    (("investor", "passport", "application/pdf", 0), "empty"),
    (("investor", "passport", "application/pdf", 2 * 1024 * 1024), "Maximum size is 1MB"),
])
def test_validate_upload_rejects(args, message):
    with pytest.raises(DocumentError, match=message):
        validate_upload(*args, max_mb=1)


def test_stored_filename_keeps_only_extension():
    name = stored_filename("My Passport.JPG")
    assert name.endswith(".jpg")
    assert "Passport" not in name
    assert stored_filename(None).count("-") >= 1


def test_save_and_delete(tmp_path):
    path = save_document(b"%PDF", "deck.pdf", upload_dir=str(tmp_path / "docs"))
    assert os.path.dirname(path) == str(tmp_path / "docs")
    with open(path, "rb") as f:
        assert f.read() == b"%PDF"

    assert delete_document(path) is True
    assert delete_document(path) is False


def test_status_summary():
    docs = [
        doc("proof_of_funds", "approved"),
        doc("passport", "rejected"),
        doc("national_id", "pending"),
    ]
    summary = status_summary(docs, "investor")
    assert summary["total"] == 3
    assert summary["uploaded"] == 3
    assert (summary["pending"], summary["approved"], summary["rejected"]) == (1, 1, 1)
    assert [m["type"] for m in summary["missing"]] == ["intent_letter"]
    assert summary["complete"] is False


def test_status_summary_complete_when_enough_approved():
    docs = [doc(t, "approved") for t in ("proof_of_funds", "intent_letter", "passport")]
    summary = status_summary(docs, "both")
    assert summary["missing"] == []
    assert summary["complete"] is True
