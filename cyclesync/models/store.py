"""
Store document model and import validation.

The store document is the single persisted unit: the active profile index plus
every profile. The same shape is produced by export and accepted by import.

Typical usage:
    result = parse_store_document(uploaded_text)
    if result.success:
        store.replace_all(result.document)
"""
import json
from typing import Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from cyclesync.models.profile import Profile

CURRENT_DOCUMENT_VERSION = 1
LEGACY_DOCUMENT_VERSION = 0


class StoreDocument(BaseModel):
    """
    Represents the whole persisted store.

    A null active index means no profiles exist and onboarding is required.
    """
    model_config = ConfigDict(populate_by_name=True)

    current_user_index: Optional[int] = Field(None, alias="currentUserIndex")
    users: List[Profile]

    @model_validator(mode="after")
    def anchor_active_index(self) -> "StoreDocument":
        """Keep the active index pointing at an existing profile."""
        if not self.users:
            self.current_user_index = None
        elif (
            self.current_user_index is None
            or not 0 <= self.current_user_index < len(self.users)
        ):
            self.current_user_index = 0
        return self

    def to_document(self) -> dict:
        """Serialize to the JSON-compatible persisted shape."""
        return self.model_dump(mode="json", by_alias=True)


class ImportResult(BaseModel):
    """
    Outcome of validating a candidate store document.
    """
    success: bool
    document: Optional[StoreDocument] = None
    version: Optional[int] = None
    error: Optional[str] = None


def detect_document_version(raw: dict) -> int:
    """
    Detect which document version a raw mapping was written with.

    Version 0 documents predate daily logging and carry no ``logs`` key on
    their profiles.
    """
    users = raw.get("users") or []
    if any(isinstance(user, dict) and "logs" not in user for user in users):
        return LEGACY_DOCUMENT_VERSION
    return CURRENT_DOCUMENT_VERSION


def _upgrade_legacy_document(raw: dict) -> dict:
    """Add empty log maps to version 0 profiles."""
    upgraded = dict(raw)
    upgraded["users"] = [
        {**user, "logs": {}} if isinstance(user, dict) and "logs" not in user else user
        for user in raw["users"]
    ]
    return upgraded


def parse_store_document(candidate: Union[str, bytes, dict, Any]) -> ImportResult:
    """
    Validate a candidate store document.

    Args:
        candidate: JSON text, JSON bytes or an already decoded mapping

    Returns:
        ImportResult with the parsed document on success, or the reason
        for rejection on failure

    Example:
        >>> result = parse_store_document('{"users": []}')
        >>> result.success
        True
    """
    if isinstance(candidate, StoreDocument):
        candidate = candidate.to_document()

    if isinstance(candidate, (str, bytes, bytearray)):
        try:
            candidate = json.loads(candidate)
        except (ValueError, TypeError) as e:
            return ImportResult(success=False, error=f"Document is not valid JSON: {str(e)}")

    if not isinstance(candidate, dict):
        return ImportResult(success=False, error="Document must be a JSON object")

    if not isinstance(candidate.get("users"), list):
        return ImportResult(success=False, error="Document does not contain a profile list")

    version = detect_document_version(candidate)
    if version == LEGACY_DOCUMENT_VERSION:
        candidate = _upgrade_legacy_document(candidate)

    try:
        document = StoreDocument.model_validate(candidate)
    except ValidationError as e:
        return ImportResult(
            success=False,
            version=version,
            error=f"Document failed validation: {e.error_count()} error(s)"
        )

    return ImportResult(success=True, document=document, version=version)
