from typing import Any

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import NonNegativeInt
from pydantic import computed_field
from pydantic import field_validator

from filetray.core.validation import REASON_MESSAGES
from filetray.core.validation import ReasonCode


class FileHandle(BaseModel):
    """Describes a user-selected file as reported by the browser.

    Only the metadata is carried; the bytes stay with the client. Accepts the
    browser ``File`` keys (``type``, ``lastModified``) as aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    size: int
    content_type: str = Field(default="", validation_alias=AliasChoices("content_type", "type"))
    last_modified: int = Field(default=0, validation_alias=AliasChoices("last_modified", "lastModified"))


class FileEntry(BaseModel):
    """One accepted file in the collection."""

    model_config = ConfigDict(frozen=True)

    id: str
    file: FileHandle
    meta: Any | None = None


class UploadPolicy(BaseModel):
    """Admission rules for a collection, fixed at construction.

    Attributes:
        allowed_extensions: Lowercase extensions without the dot. Empty means no restriction.
        allowed_mime_types: Exact MIME labels or ``group/*`` wildcards. Empty means no restriction.
        max_file_size: Per-file byte ceiling, ``None`` for unlimited.
        max_files: Collection size ceiling, ``None`` for unlimited.
        allow_duplicates: Whether files with the same name, size and timestamp may coexist.
    """

    model_config = ConfigDict(frozen=True)

    allowed_extensions: frozenset[str] = frozenset()
    allowed_mime_types: frozenset[str] = frozenset()
    max_file_size: NonNegativeInt | None = None
    max_files: NonNegativeInt | None = None
    allow_duplicates: bool = False

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = [v]
        if v is None:
            return frozenset()
        return frozenset(ext.strip().lstrip(".").lower() for ext in v if ext and ext.strip().lstrip("."))

    @field_validator("allowed_mime_types", mode="before")
    @classmethod
    def normalize_mime_types(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = [v]
        if v is None:
            return frozenset()
        return frozenset(mime.strip() for mime in v if mime and mime.strip())


class Rejection(BaseModel):
    """A candidate that failed admission, with the first rule it broke."""

    file: FileHandle
    reason: ReasonCode

    @computed_field  # type: ignore[prop-decorator]
    @property
    def message(self) -> str:
        return REASON_MESSAGES[self.reason]


class AddResult(BaseModel):
    """Outcome of an ``add_files`` call."""

    added: int = 0
    rejected: list[Rejection] = Field(default_factory=list)
    entries: list[FileEntry] = Field(default_factory=list)
