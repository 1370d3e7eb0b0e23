"""
Services for the Files API

Each operation runs one statement on the session it is given and
raises a domain exception from core.exceptions on failure.
"""

import uuid
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from core.deps import SessionDep
from core.exceptions import NotFound, StorageUnavailable
from core.logger import logger
from api.files.codec import decode_payload, encode_payload
from api.files.models import FileRecord, FileInfo


def list_files(session: SessionDep) -> list[FileInfo]:
    """
    List metadata for every stored file, in no particular order.
    The contents column is never read.
    """
    try:
        rows = session.exec(
            select(
                FileRecord.id,
                FileRecord.name,
                FileRecord.created_date,
                FileRecord.file_size,
            )
        ).all()
    except SQLAlchemyError as e:
        logger.error("Failed to list files: %s", e)
        raise StorageUnavailable(f"Failed to list files: {e}") from e

    return [
        FileInfo.from_row(file_id, name, created_date, file_size)
        for file_id, name, created_date, file_size in rows
    ]


def get_file_content(session: SessionDep, file_id: str) -> str:
    """
    Get the contents of a stored file, base64 encoded.

    Raises:
        NotFound: if no file has this id
        StorageUnavailable: if the lookup fails
    """
    try:
        contents = session.exec(
            select(FileRecord.contents).where(FileRecord.id == file_id)
        ).first()
    except SQLAlchemyError as e:
        logger.error("Failed to read file %s: %s", file_id, e)
        raise StorageUnavailable(f"Failed to read file {file_id}: {e}") from e

    if contents is None:
        logger.info("No file found for id %s", file_id)
        raise NotFound(file_id)

    return encode_payload(contents)


def put_file(session: SessionDep, name: str, contents: str) -> str:
    """
    Store a new file and return its id.

    The payload is decoded before the database is touched, so invalid
    base64 never results in a row.

    Raises:
        EncodingError: if contents is not valid base64
        StorageUnavailable: if the insert fails
    """
    data = decode_payload(contents)

    file_id = str(uuid.uuid4())
    record = FileRecord(
        id=file_id,
        name=name,
        created_date=datetime.now().astimezone().isoformat(),
        file_size=len(data),
        contents=data,
    )

    try:
        session.add(record)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Failed to store file '%s': %s", name, e)
        raise StorageUnavailable(f"Failed to store file '{name}': {e}") from e

    logger.info("Stored file '%s' (%d bytes) as %s", name, len(data), file_id)
    return file_id
