import pytest
from pydantic import ValidationError

from filetray.core.validation import ReasonCode
from filetray.models.file_models import FileEntry
from filetray.models.file_models import FileHandle
from filetray.models.file_models import Rejection
from filetray.models.file_models import UploadPolicy


def test_file_handle_accepts_browser_keys():
    handle = FileHandle.model_validate({"name": "a.png", "size": 3, "type": "image/png", "lastModified": 42})
    assert handle.content_type == "image/png"
    assert handle.last_modified == 42


def test_file_handle_defaults_to_unknown_type():
    handle = FileHandle(name="blob", size=0)
    assert handle.content_type == ""
    assert handle.last_modified == 0


def test_entry_is_frozen(make_file):
    entry = FileEntry(id="1", file=make_file())
    assert entry.meta is None
    with pytest.raises(ValidationError):
        entry.meta = {"x": 1}


def test_policy_normalizes_extensions():
    policy = UploadPolicy(allowed_extensions=[".PNG", "jpg ", ""])
    assert policy.allowed_extensions == frozenset({"png", "jpg"})


def test_policy_normalizes_mime_types():
    policy = UploadPolicy(allowed_mime_types=[" image/* ", "application/pdf"])
    assert policy.allowed_mime_types == frozenset({"image/*", "application/pdf"})


def test_policy_defaults_are_unrestricted():
    policy = UploadPolicy()
    assert policy.allowed_extensions == frozenset()
    assert policy.allowed_mime_types == frozenset()
    assert policy.max_file_size is None
    assert policy.max_files is None
    assert policy.allow_duplicates is False


@pytest.mark.parametrize("field", ["max_file_size", "max_files"])
def test_policy_rejects_negative_limits(field):
    with pytest.raises(ValidationError):
        UploadPolicy(**{field: -1})


def test_rejection_message(make_file):
    rejection = Rejection(file=make_file(), reason=ReasonCode.SIZE_EXCEEDED)
    assert rejection.message == "File size exceeds the maximum limit"
    assert rejection.model_dump()["message"] == "File size exceeds the maximum limit"
