import logging
import math
from typing import Any
from uuid import uuid4

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Request
from fastapi import Response
from fastapi import status
from pydantic import BaseModel
from pydantic import Field as PydanticField

from filetray.models.file_models import AddResult
from filetray.models.file_models import FileEntry
from filetray.models.file_models import FileHandle
from filetray.services.file_collection import FileCollection

# Configure module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Files"])


class CollectionStats(BaseModel):
    file_count: int
    total_size: int
    has_files: bool
    can_add_more: bool
    remaining_slots: int | None = PydanticField(default=None, description="Free slots, null when unbounded.")


class MetaPayload(BaseModel):
    meta: Any | None = PydanticField(default=None, description="Arbitrary payload attached to the file.")


def get_collection(request: Request) -> FileCollection:
    """Returns the collection owned by the running application."""
    return request.app.state.file_collection


# NOTE: handlers are coroutines that never await while touching the
# collection, so the event loop runs them one at a time.


@router.get("/files", response_model=list[FileEntry])
async def list_files(collection: FileCollection = Depends(get_collection)) -> list[FileEntry]:
    return list(collection.files)


@router.post("/files", response_model=AddResult)
async def add_files(
    files: list[FileHandle],
    collection: FileCollection = Depends(get_collection),
) -> AddResult:
    """Submits file descriptors for admission.

    Rejected files are reported in the response body with their reason; the
    request itself succeeds as long as the payload is well-formed.
    """
    request_id = str(uuid4())
    logger.info("[%s] Add request received for %d file(s)", request_id, len(files))
    result = collection.add_files(files)
    logger.info("[%s] Added %d, rejected %d", request_id, result.added, len(result.rejected))
    return result


@router.delete("/files", status_code=status.HTTP_204_NO_CONTENT)
async def reset_files(collection: FileCollection = Depends(get_collection)) -> Response:
    collection.reset()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/files/stats", response_model=CollectionStats)
async def collection_stats(collection: FileCollection = Depends(get_collection)) -> CollectionStats:
    remaining = collection.remaining_slots()
    return CollectionStats(
        file_count=collection.file_count,
        total_size=collection.total_size,
        has_files=collection.has_files,
        can_add_more=collection.can_add_more(),
        remaining_slots=None if math.isinf(remaining) else int(remaining),
    )


@router.get("/files/search", response_model=list[FileEntry])
async def search_files(
    name: str | None = None,
    extension: str | None = None,
    mime_type: str | None = None,
    collection: FileCollection = Depends(get_collection),
) -> list[FileEntry]:
    """Looks files up by exactly one of name, extension or MIME type."""
    criteria = [c for c in (name, extension, mime_type) if c is not None]
    if len(criteria) != 1:
        raise HTTPException(status_code=400, detail="Provide exactly one of: name, extension, mime_type.")

    if name is not None:
        entry = collection.find_file_by_name(name)
        return [entry] if entry else []
    if extension is not None:
        return collection.find_files_by_extension(extension)
    return collection.find_files_by_mime_type(mime_type or "")


@router.get("/files/{file_id}", response_model=FileEntry)
async def get_file(file_id: str, collection: FileCollection = Depends(get_collection)) -> FileEntry:
    entry = collection.find_file_by_id(file_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"File {file_id} not found.")
    return entry


@router.put("/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def replace_file(
    file_id: str,
    new_file: FileHandle,
    collection: FileCollection = Depends(get_collection),
) -> Response:
    """Swaps the file behind an entry. The replacement is not re-validated."""
    collection.replace_file(file_id, new_file)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/files/{file_id}/meta", status_code=status.HTTP_204_NO_CONTENT)
async def update_file_meta(
    file_id: str,
    payload: MetaPayload,
    collection: FileCollection = Depends(get_collection),
) -> Response:
    collection.update_file_meta(file_id, payload.meta)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_file(file_id: str, collection: FileCollection = Depends(get_collection)) -> Response:
    collection.remove_file(file_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
