import pytest

from filetray.models.file_models import FileHandle


# Fixture factory to create file descriptors with sensible defaults
@pytest.fixture
def make_file():
    def _make_file(
        name: str = "file.txt",
        size: int = 10,
        content_type: str = "text/plain",
        last_modified: int = 0,
    ) -> FileHandle:
        return FileHandle(
            name=name,
            size=size,
            content_type=content_type,
            last_modified=last_modified,
        )

    return _make_file
