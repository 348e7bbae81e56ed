"""Owns an ordered collection of accepted files and gates what gets in.

Every mutation builds the next snapshot privately and publishes it in one
step, so listeners and readers only ever observe whole states. Rejections
are returned as values; nothing here raises for an ordinary refusal.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator
from typing import Any
from uuid import uuid4

from filetray.core.exceptions import DuplicateIdError
from filetray.core.validation import validate
from filetray.models.file_models import AddResult
from filetray.models.file_models import FileEntry
from filetray.models.file_models import FileHandle
from filetray.models.file_models import Rejection
from filetray.models.file_models import UploadPolicy

logger = logging.getLogger(__name__)

Snapshot = tuple[FileEntry, ...]
Listener = Callable[[Snapshot], None]


def _default_id_factory() -> str:
    return str(uuid4())


class FileCollection:
    """Collection manager for user-selected files.

    Args:
        policy: Admission rules. Defaults to an unrestricted policy.
        id_factory: Callable returning a fresh entry id. Defaults to a random UUID.
    """

    def __init__(
        self,
        policy: UploadPolicy | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self._policy = policy or UploadPolicy()
        self._id_factory = id_factory or _default_id_factory
        self._files: Snapshot = ()
        self._issued_ids: set[str] = set()
        self._listeners: list[Listener] = []

    @property
    def policy(self) -> UploadPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` to receive each new snapshot. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, files: Snapshot) -> None:
        self._files = files
        for listener in list(self._listeners):
            try:
                listener(files)
            except Exception as e:
                logger.error("Collection listener %r failed: %s", listener, e, exc_info=True)

    def _new_id(self, pending: set[str]) -> str:
        file_id = self._id_factory()
        if file_id in self._issued_ids or file_id in pending:
            raise DuplicateIdError(f"Id factory returned an id already in use: {file_id}")
        return file_id

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_file(self, file: FileHandle) -> AddResult:
        return self.add_files([file])

    def add_files(self, files: Iterable[FileHandle]) -> AddResult:
        """Validate candidates in order and append the admissible ones.

        Each candidate is checked against the working snapshot, which already
        contains files accepted earlier in the same call. The collection is
        updated once, after the whole batch has been classified.
        """
        working = list(self._files)
        accepted: list[FileEntry] = []
        rejected: list[Rejection] = []
        new_ids: set[str] = set()

        for file in files:
            reason = validate(file, working, self._policy)
            if reason is not None:
                logger.warning("Rejected file %s: %s", file.name, reason.value)
                rejected.append(Rejection(file=file, reason=reason))
                continue

            file_id = self._new_id(new_ids)
            new_ids.add(file_id)

            entry = FileEntry(id=file_id, file=file)
            working.append(entry)
            accepted.append(entry)

        if accepted:
            self._issued_ids.update(new_ids)
            self._publish(tuple(working))

        logger.info(
            "Processed %d file(s): %d added, %d rejected. Collection size: %d",
            len(accepted) + len(rejected),
            len(accepted),
            len(rejected),
            len(self._files),
        )
        return AddResult(added=len(accepted), rejected=rejected, entries=accepted)

    def remove_file(self, file_id: str) -> None:
        remaining = tuple(entry for entry in self._files if entry.id != file_id)
        if len(remaining) == len(self._files):
            return
        logger.debug("Removed file %s", file_id)
        self._publish(remaining)

    def reset(self) -> None:
        if not self._files:
            return
        logger.debug("Reset collection of %d file(s)", len(self._files))
        self._publish(())

    def replace_file(self, file_id: str, new_file: FileHandle) -> None:
        """Swap the underlying file of an entry, keeping its id and meta.

        The replacement is not validated against the policy; callers must
        check it themselves before calling.
        """
        self._update_entry(file_id, file=new_file)

    def update_file_meta(self, file_id: str, meta: Any) -> None:
        self._update_entry(file_id, meta=meta)

    def _update_entry(self, file_id: str, **changes: Any) -> None:
        if self.find_file_by_id(file_id) is None:
            return
        logger.debug("Updating %s on file %s", ", ".join(changes), file_id)
        self._publish(
            tuple(entry.model_copy(update=changes) if entry.id == file_id else entry for entry in self._files)
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def files(self) -> Snapshot:
        return self._files

    @property
    def file_count(self) -> int:
        return len(self._files)

    @property
    def total_size(self) -> int:
        return sum(entry.file.size for entry in self._files)

    @property
    def has_files(self) -> bool:
        return self.file_count > 0

    def can_add_more(self) -> bool:
        if self._policy.max_files is None:
            return True
        return self.file_count < self._policy.max_files

    def remaining_slots(self) -> int | float:
        """Free slots left, or ``math.inf`` when the count is not capped."""
        if self._policy.max_files is None:
            return math.inf
        return max(0, self._policy.max_files - self.file_count)

    def find_file_by_id(self, file_id: str) -> FileEntry | None:
        return next((entry for entry in self._files if entry.id == file_id), None)

    def find_file_by_name(self, name: str) -> FileEntry | None:
        """First entry with this exact name, in insertion order."""
        return next((entry for entry in self._files if entry.file.name == name), None)

    def find_files_by_extension(self, extension: str) -> list[FileEntry]:
        suffix = f".{extension.lstrip('.').lower()}"
        return [entry for entry in self._files if entry.file.name.lower().endswith(suffix)]

    def find_files_by_mime_type(self, mime_type: str) -> list[FileEntry]:
        return [entry for entry in self._files if entry.file.content_type == mime_type]

    def __len__(self) -> int:
        return self.file_count

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self._files)

    def __contains__(self, file_id: object) -> bool:
        return any(entry.id == file_id for entry in self._files)
