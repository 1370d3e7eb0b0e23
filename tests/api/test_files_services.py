"""
Tests for the file storage operations
"""

import uuid
from datetime import datetime
from unittest.mock import patch

import pytest
from sqlalchemy import event, text
from sqlmodel import Session, func, select

from api.files.codec import encode_payload
from api.files.models import FileRecord
from api.files.services import get_file_content, list_files, put_file
from core.exceptions import EncodingError, NotFound, StorageUnavailable


def count_records(session: Session) -> int:
    return session.exec(select(func.count()).select_from(FileRecord)).one()


class TestPutFile:
    """Test put_file"""

    def test_put_then_get(self, session: Session):
        file_id = put_file(session, "a.txt", encode_payload(b"hello"))

        assert isinstance(file_id, str)
        assert get_file_content(session, file_id) == encode_payload(b"hello")

    def test_id_is_uuid(self, session: Session):
        file_id = put_file(session, "a.txt", encode_payload(b"hello"))
        assert str(uuid.UUID(file_id)) == file_id

    def test_record_fields(self, session: Session):
        before = datetime.now().astimezone()
        file_id = put_file(session, "notes.txt", encode_payload(b"twelve bytes"))

        record = session.get(FileRecord, file_id)
        assert record.name == "notes.txt"
        assert record.file_size == 12
        assert record.contents == b"twelve bytes"

        created = datetime.fromisoformat(record.created_date)
        assert created.tzinfo is not None
        assert created >= before.replace(microsecond=0)

    def test_size_matches_decoded_length(self, session: Session):
        payloads = [b"", b"x", b"\x00\xff" * 500, bytes(range(256))]
        ids = [
            put_file(session, f"file{i}", encode_payload(data))
            for i, data in enumerate(payloads)
        ]
        for file_id, data in zip(ids, payloads):
            assert session.get(FileRecord, file_id).file_size == len(data)

    def test_ids_are_unique(self, session: Session):
        ids = {put_file(session, "same name", encode_payload(b"data")) for _ in range(25)}

        assert len(ids) == 25
        stored = set(session.exec(select(FileRecord.id)).all())
        assert stored == ids

    def test_name_stored_as_given(self, session: Session):
        name = "  ../weird name\twith ünïcode.bin "
        file_id = put_file(session, name, encode_payload(b"1"))
        assert session.get(FileRecord, file_id).name == name

    def test_invalid_base64_inserts_nothing(self, session: Session):
        put_file(session, "keep.txt", encode_payload(b"keep"))

        with pytest.raises(EncodingError):
            put_file(session, "x", "not-valid-base64!!")

        assert count_records(session) == 1

    def test_invalid_base64_fails_before_storage(self, broken_session: Session):
        """Decoding happens before the database is touched"""
        with pytest.raises(EncodingError):
            put_file(broken_session, "x", "not-valid-base64!!")

    def test_storage_failure(self, broken_session: Session):
        with pytest.raises(StorageUnavailable, match="Failed to store file 'a.txt'"):
            put_file(broken_session, "a.txt", encode_payload(b"hello"))

    def test_id_collision_is_not_retried(self, session: Session):
        fixed = uuid.UUID("12345678-1234-5678-1234-567812345678")
        with patch("api.files.services.uuid.uuid4", return_value=fixed):
            put_file(session, "first", encode_payload(b"1"))
            with pytest.raises(StorageUnavailable):
                put_file(session, "second", encode_payload(b"2"))

        assert count_records(session) == 1
        assert session.get(FileRecord, str(fixed)).name == "first"


class TestGetFileContent:
    """Test get_file_content"""

    def test_not_found_mentions_id(self, session: Session):
        with pytest.raises(NotFound) as exc_info:
            get_file_content(session, "nonexistent-id")

        assert "nonexistent-id" in str(exc_info.value)
        assert exc_info.value.file_id == "nonexistent-id"

    def test_binary_contents(self, session: Session):
        """Contents that are not valid UTF-8 come back unchanged"""
        data = b"\x89PNG\r\n\x1a\n\x00\xff\xfe"
        file_id = put_file(session, "image.png", encode_payload(data))

        assert get_file_content(session, file_id) == encode_payload(data)

    def test_empty_file(self, session: Session):
        file_id = put_file(session, "empty", "")
        assert get_file_content(session, file_id) == ""

    def test_storage_failure(self, broken_session: Session):
        with pytest.raises(StorageUnavailable):
            get_file_content(broken_session, "any-id")


class TestListFiles:
    """Test list_files"""

    def test_empty(self, session: Session):
        assert list_files(session) == []

    def test_lists_all_files(self, session: Session):
        ids = {
            put_file(session, name, encode_payload(name.encode()))
            for name in ("A", "B", "C")
        }

        files = list_files(session)

        assert len(files) == 3
        assert {f.id for f in files} == ids
        for info in files:
            assert "contents" not in info.model_dump()
            assert info.fileSize == 1

    def test_lists_rows_from_earlier_service(self, session: Session):
        """Rows written by the earlier service carry nanosecond timestamps"""
        session.connection().execute(
            text(
                "INSERT INTO storage (id, name, created_date, file_size, contents) "
                "VALUES (:id, :name, :created_date, :file_size, :contents)"
            ).bindparams(
                id="legacy-id",
                name="old.txt",
                created_date="2022-05-01 12:34:56.123456789+09:00",
                file_size=3,
                contents=b"old",
            )
        )
        session.commit()

        files = list_files(session)

        assert len(files) == 1
        assert files[0].id == "legacy-id"
        assert files[0].createDate == "Sun, 01 May 2022 12:34:56 +0900"
        assert files[0].fileSize == 3
        assert get_file_content(session, "legacy-id") == encode_payload(b"old")

    def test_list_does_not_load_contents(self, session: Session):
        put_file(session, "big", encode_payload(b"0" * 1024))
        statements = []

        @event.listens_for(session.get_bind(), "before_cursor_execute")
        def capture(conn, cursor, statement, *args):  # pylint: disable=unused-argument
            statements.append(statement)

        try:
            list_files(session)
        finally:
            event.remove(session.get_bind(), "before_cursor_execute", capture)

        assert statements
        assert all("contents" not in statement for statement in statements)

    def test_storage_failure(self, broken_session: Session):
        with pytest.raises(StorageUnavailable, match="Failed to list files"):
            list_files(broken_session)
