"""
Routes/endpoints for the Files API

HTTP   URI                        Action
----   ---                        ------
GET    /api/v1/files              List metadata of all stored files
POST   /api/v1/files              Store a new file, returns its id
GET    /api/v1/files/[id]         Retrieve the base64 contents of a file

The operation ids are listFiles, putFile and getFile, the field names
of the earlier GraphQL endpoint. The wire format is plain REST/JSON, so
clients of that GraphQL endpoint are not compatible with these routes.
"""

from fastapi import APIRouter, HTTPException, status
from core.deps import SessionDep
from core.exceptions import EncodingError, NotFound, StorageUnavailable
from api.files.models import FileInfo, FileUpload
from api.files import services

router = APIRouter(prefix="/files", tags=["File Endpoints"])


def _storage_unavailable(e: StorageUnavailable) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=e.message,
    )


@router.get(
    "",
    name="listFiles",
    response_model=list[FileInfo],
    status_code=status.HTTP_200_OK,
    tags=["File Endpoints"],
)
def list_files(session: SessionDep) -> list[FileInfo]:
    """
    List id, name, creation date and size of every stored file.
    No ordering is guaranteed.
    """
    try:
        return services.list_files(session=session)
    except StorageUnavailable as e:
        raise _storage_unavailable(e) from e


@router.post(
    "",
    name="putFile",
    response_model=str,
    status_code=status.HTTP_201_CREATED,
    tags=["File Endpoints"],
)
def put_file(session: SessionDep, file_in: FileUpload) -> str:
    """
    Store a file sent as a name and base64 encoded contents.
    Returns the id assigned to the new file.
    """
    try:
        return services.put_file(
            session=session,
            name=file_in.name,
            contents=file_in.contents,
        )
    except EncodingError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        ) from e
    except StorageUnavailable as e:
        raise _storage_unavailable(e) from e


@router.get(
    "/{file_id}",
    name="getFile",
    response_model=str,
    status_code=status.HTTP_200_OK,
    tags=["File Endpoints"],
)
def get_file(session: SessionDep, file_id: str) -> str:
    """
    Retrieve the contents of a file as a base64 string.
    """
    try:
        return services.get_file_content(session=session, file_id=file_id)
    except NotFound as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        ) from e
    except StorageUnavailable as e:
        raise _storage_unavailable(e) from e
