"""
Supporting document storage.

Validates uploads (PDF, JPEG, PNG up to the configured size), writes
them under ``<upload_dir>/<client_id>/`` and keeps their metadata in
memory.
"""

from __future__ import annotations

import os
import threading
import uuid
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from loguru import logger

from riskdesk.config import ALLOWED_DOCUMENT_EXTENSIONS, ALLOWED_DOCUMENT_TYPES
from riskdesk.exceptions import (
    DocumentNotFoundError,
    DocumentTooLargeError,
    EmptyDocumentError,
    UnsupportedDocumentTypeError,
)
from riskdesk.schemas import Document
from riskdesk.utils.dates import utcnow


def format_size(size: int) -> str:
    """Human-readable size in megabytes, e.g. ``"1.25 MB"``."""
    return f"{size / (1024 * 1024):.2f} MB"


class DocumentStore:
    def __init__(
        self,
        upload_dir: str | Path,
        max_bytes: int,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._root = Path(upload_dir)
        self._max_bytes = max_bytes
        self._clock = clock
        self._documents: dict[str, Document] = {}
        self._lock = threading.Lock()

    def _validate(self, filename: str, media_type: str, content: bytes) -> None:
        ext = os.path.splitext(filename)[1].lower()
        if media_type not in ALLOWED_DOCUMENT_TYPES or ext not in ALLOWED_DOCUMENT_EXTENSIONS:
            logger.warning(f"Rejected upload {filename!r}: unsupported type {media_type!r}")
            raise UnsupportedDocumentTypeError(media_type, sorted(ALLOWED_DOCUMENT_TYPES))
        if not content:
            raise EmptyDocumentError()
        if len(content) > self._max_bytes:
            logger.warning(f"Rejected upload {filename!r}: {len(content)} bytes over limit")
            raise DocumentTooLargeError(len(content), self._max_bytes)

    def save(self, client_id: str, filename: str, media_type: str, content: bytes) -> Document:
        """Validate and persist an upload for *client_id*."""
        name = Path(filename or "").name
        self._validate(name, media_type, content)

        client_dir = self._root / client_id
        client_dir.mkdir(parents=True, exist_ok=True)
        path = client_dir / f"{uuid.uuid4().hex}-{name}"
        path.write_bytes(content)

        document = Document(
            id=str(uuid.uuid4()),
            client_id=client_id,
            name=name,
            size=format_size(len(content)),
            type=media_type,
            path=str(path),
            upload_date=self._clock(),
        )
        with self._lock:
            self._documents[document.id] = document
        logger.info(f"Stored document {document.id} ({document.size}) for client {client_id}")
        return document

    def list_for_client(self, client_id: str) -> list[Document]:
        with self._lock:
            return [d for d in self._documents.values() if d.client_id == client_id]

    def get(self, client_id: str, document_id: str) -> Document:
        """Return a document, treating one owned by another client as missing."""
        with self._lock:
            document = self._documents.get(document_id)
        if document is None or document.client_id != client_id:
            raise DocumentNotFoundError(document_id)
        return document

    def file_path(self, client_id: str, document_id: str) -> Path:
        path = Path(self.get(client_id, document_id).path)
        if not path.exists():
            raise DocumentNotFoundError(document_id, "File not found on disk")
        return path

    def delete(self, client_id: str, document_id: str) -> None:
        document = self.get(client_id, document_id)
        Path(document.path).unlink(missing_ok=True)
        with self._lock:
            self._documents.pop(document_id, None)
        logger.info(f"Deleted document {document_id} for client {client_id}")

    def delete_for_client(self, client_id: str) -> int:
        """Remove every document of *client_id*; returns how many were removed."""
        documents = self.list_for_client(client_id)
        for document in documents:
            self.delete(client_id, document.id)
        return len(documents)
