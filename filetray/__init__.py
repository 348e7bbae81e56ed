"""Admission control and queries for a collection of user-selected files."""

from filetray.core.validation import ReasonCode  # noqa: F401
from filetray.core.validation import validate  # noqa: F401
from filetray.models.file_models import AddResult  # noqa: F401
from filetray.models.file_models import FileEntry  # noqa: F401
from filetray.models.file_models import FileHandle  # noqa: F401
from filetray.models.file_models import Rejection  # noqa: F401
from filetray.models.file_models import UploadPolicy  # noqa: F401
from filetray.services.file_collection import FileCollection  # noqa: F401
