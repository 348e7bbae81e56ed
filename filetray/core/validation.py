"""Admission checks applied to every candidate file.

All functions here are pure: they read the candidate, the snapshot of entries
already admitted and the policy, and never mutate anything. ``validate`` runs
the checks in a fixed order and reports only the first failure.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from filetray.models.file_models import FileEntry
    from filetray.models.file_models import FileHandle
    from filetray.models.file_models import UploadPolicy

logger = logging.getLogger(__name__)


class ReasonCode(str, Enum):
    """Why a candidate was refused."""

    LIMIT_EXCEEDED = "limit_exceeded"
    SIZE_EXCEEDED = "size_exceeded"
    EXTENSION_NOT_ALLOWED = "extension_not_allowed"
    TYPE_UNDETERMINED = "type_undetermined"
    MIME_NOT_ALLOWED = "mime_not_allowed"
    DUPLICATE = "duplicate"


REASON_MESSAGES: dict[ReasonCode, str] = {
    ReasonCode.LIMIT_EXCEEDED: "Exceeds the maximum number of files allowed",
    ReasonCode.SIZE_EXCEEDED: "File size exceeds the maximum limit",
    ReasonCode.EXTENSION_NOT_ALLOWED: "File extension is not allowed",
    ReasonCode.TYPE_UNDETERMINED: "Unable to determine file type",
    ReasonCode.MIME_NOT_ALLOWED: "File MIME type is not allowed",
    ReasonCode.DUPLICATE: "Duplicate file detected",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def get_extension(filename: str) -> str | None:
    """Return the lowercased text after the last dot, or ``None`` if there is none."""
    if "." not in filename:
        return None
    ext = filename.rsplit(".", 1)[1].lower()
    return ext or None


def is_mime_type_allowed(mime_type: str, allowed_mime_types: Iterable[str]) -> bool:
    """Match a MIME label against exact entries and ``group/*`` wildcards."""
    for allowed in allowed_mime_types:
        if allowed.endswith("/*"):
            group = allowed[: -len("/*")]
            if mime_type.startswith(f"{group}/"):
                return True
        elif mime_type == allowed:
            return True
    return False


def is_same_file(a: FileHandle, b: FileHandle) -> bool:
    return a.name == b.name and a.size == b.size and a.last_modified == b.last_modified


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def check_capacity(current_count: int, policy: UploadPolicy) -> ReasonCode | None:
    if policy.max_files is None:
        return None
    if current_count + 1 > policy.max_files:
        return ReasonCode.LIMIT_EXCEEDED
    return None


def check_size(candidate: FileHandle, policy: UploadPolicy) -> ReasonCode | None:
    if policy.max_file_size is None:
        return None
    if candidate.size > policy.max_file_size:
        return ReasonCode.SIZE_EXCEEDED
    return None


def check_type(candidate: FileHandle, policy: UploadPolicy) -> ReasonCode | None:
    """Extension allow-list first, then the MIME allow-list."""
    if policy.allowed_extensions:
        ext = get_extension(candidate.name)
        if ext is None or ext not in policy.allowed_extensions:
            return ReasonCode.EXTENSION_NOT_ALLOWED

    if policy.allowed_mime_types:
        if not candidate.content_type:
            return ReasonCode.TYPE_UNDETERMINED
        if not is_mime_type_allowed(candidate.content_type, policy.allowed_mime_types):
            return ReasonCode.MIME_NOT_ALLOWED

    return None


def check_duplicate(
    candidate: FileHandle,
    existing: Sequence[FileEntry],
    policy: UploadPolicy,
) -> ReasonCode | None:
    if policy.allow_duplicates:
        return None
    if any(is_same_file(entry.file, candidate) for entry in existing):
        return ReasonCode.DUPLICATE
    return None


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def validate(
    candidate: FileHandle,
    existing: Sequence[FileEntry],
    policy: UploadPolicy,
) -> ReasonCode | None:
    """Run capacity, size, type and duplicate checks in that order.

    Args:
        candidate: The file proposed for admission.
        existing: Entries already admitted, including earlier ones from the same batch.
        policy: The rules in force.

    Returns:
        The first failing ``ReasonCode``, or ``None`` if the file is admissible.
    """
    reason = (
        check_capacity(len(existing), policy)
        or check_size(candidate, policy)
        or check_type(candidate, policy)
        or check_duplicate(candidate, existing, policy)
    )
    if reason is not None:
        logger.debug("Candidate %s failed check %s", candidate.name, reason.value)
    return reason
