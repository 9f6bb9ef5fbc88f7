# Services/blob_store.py
"""
Image storage for car pictures.

Mirrors the stream API of a GridFS bucket: uploads are written to a stream
whose ``file_id`` is generated up front and persisted on ``close()``,
downloads are read from a stream opened by id.
"""
import io
import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import exc
from sqlalchemy.orm import sessionmaker

from Models.car_image import CarImage
from Services.exceptions import NotFound, StorageError

logger = logging.getLogger(__name__)


class UploadStream:
    def __init__(self, store: "BlobStore", filename: Optional[str]):
        self.file_id = str(uuid.uuid4())
        self.filename = filename
        self.closed = False
        self._store = store
        self._buffer = io.BytesIO()

    def write(self, data: bytes) -> int:
        if self.closed:
            raise ValueError("write to closed upload stream")
        return self._buffer.write(data)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._store._save(self.file_id, self.filename, self._buffer.getvalue())

    def abort(self) -> None:
        self.closed = True
        self._buffer = io.BytesIO()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None:
            self.close()
        else:
            self.abort()
        return False


class DownloadStream(io.BytesIO):
    def __init__(self, image: CarImage):
        super().__init__(image.data)
        self.file_id = image.id
        self.filename = image.filename
        self.length = image.length
        self.upload_date = image.upload_date


class BlobStore:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def open_upload_stream(self, filename: Optional[str]) -> UploadStream:
        return UploadStream(self, filename)

    def _save(self, file_id: str, filename: Optional[str], data: bytes) -> None:
        db = self._session_factory()
        try:
            db.add(CarImage(
                id=file_id,
                filename=filename,
                length=len(data),
                data=data,
                upload_date=datetime.utcnow()
            ))
            db.commit()
        except exc.SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error writing file '{filename}' to image store: {e}")
            raise StorageError(f"Upload of '{filename}' failed: {e}") from e
        finally:
            db.close()
        logger.debug(f"Stored image '{file_id}' ({len(data)} bytes)")

    def open_download_stream(self, file_id: str) -> DownloadStream:
        db = self._session_factory()
        try:
            image = db.query(CarImage).filter(CarImage.id == file_id).first()
            if image is None:
                raise NotFound(f"Image '{file_id}' not found")
            return DownloadStream(image)
        except exc.SQLAlchemyError as e:
            logger.error(f"Error opening download stream for image '{file_id}': {e}")
            raise StorageError(f"Download of '{file_id}' failed: {e}") from e
        finally:
            db.close()

    def delete(self, file_id: str) -> None:
        db = self._session_factory()
        try:
            count = db.query(CarImage).filter(CarImage.id == file_id).delete(synchronize_session=False)
            db.commit()
        except exc.SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error deleting image '{file_id}': {e}")
            raise StorageError(f"Delete of '{file_id}' failed: {e}") from e
        finally:
            db.close()
        if count == 0:
            raise NotFound(f"Image '{file_id}' not found")
