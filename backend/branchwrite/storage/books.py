"""
Book Storage
File-based CRUD for books: config, ordered document list, current-document marker.

Layout::

    <root>/books/<book_id>/
        config.json            BookConfig
        documents.json         [DocumentConfig]
        current_document.txt   current document id (only while set)
        documents/<doc_id>/    see DocumentStorage
"""

import uuid
from pathlib import Path
from typing import Dict, List, Optional

from branchwrite.exceptions import EntityNotFoundError, StorageIOError
from branchwrite.schemas.book import BookConfig, BookData, BookSettings, DocumentConfig
from branchwrite.schemas.project import utc_now
from branchwrite.storage.base import Artifact, ArtifactPolicy, BaseStorage
from branchwrite.utils.logger import get_logger

logger = get_logger(__name__)

BOOK_ARTIFACTS: Dict[str, Artifact] = {
    "config": Artifact("book config", "config.json", ArtifactPolicy.REQUIRED),
    "documents": Artifact("document list", "documents.json", ArtifactPolicy.OPTIONAL),
    "current_document": Artifact("current document marker", "current_document.txt", ArtifactPolicy.OPTIONAL),
}

DOCUMENTS_DIRNAME = "documents"


class BookStorage(BaseStorage):
    """File-based book storage."""

    collection = "books"
    entity_kind = "book"

    def get_book_path(self, book_id: str) -> Path:
        return self.get_entity_path(book_id)

    def get_documents_dir(self, book_id: str) -> Path:
        return self.get_book_path(book_id) / DOCUMENTS_DIRNAME

    async def create_book(
        self,
        name: str,
        description: str = "",
        author: str = "",
        genre: str = "",
    ) -> BookData:
        """Create, persist and return a new book with no documents."""
        book_id = str(uuid.uuid4())
        now = utc_now()

        book = BookData(
            config=BookConfig(
                id=book_id,
                name=name,
                description=description,
                author=author,
                genre=genre,
                created_at=now,
                last_modified=now,
                settings=BookSettings(),
            ),
            documents=[],
            current_document_id=None,
        )

        self.ensure_dir(self.get_book_path(book_id))
        self.ensure_dir(self.get_documents_dir(book_id))
        await self.save_book(book)
        logger.info("Created book %s (%s)", book_id, name)
        return book

    async def save_book(self, book: BookData) -> None:
        """
        Write config and document list, then the current-document marker.

        A cleared ``current_document_id`` removes the marker file, so the file
        on disk always agrees with the field.
        """
        book_dir = self.ensure_dir(self.get_book_path(book.config.id))

        await self.write_json(
            book_dir / BOOK_ARTIFACTS["config"].filename,
            book.config.model_dump(mode="json"),
        )
        await self.write_json(
            book_dir / BOOK_ARTIFACTS["documents"].filename,
            [doc.model_dump(mode="json") for doc in book.documents],
        )

        marker = book_dir / BOOK_ARTIFACTS["current_document"].filename
        if book.current_document_id:
            await self.write_text(marker, book.current_document_id)
        elif marker.exists():
            try:
                marker.unlink()
            except OSError as e:
                raise StorageIOError(f"Failed to clear {marker}: {e}") from e

    async def load_book(self, book_id: str) -> BookData:
        """Load a book; a missing list or marker means empty / unset."""
        book_dir = self.require_entity_dir(book_id)

        config = await self.load_json_artifact(book_dir, BOOK_ARTIFACTS["config"], BookConfig)
        documents = await self.load_json_artifact(
            book_dir, BOOK_ARTIFACTS["documents"], List[DocumentConfig], default=[]
        )
        marker = await self.load_text_artifact(book_dir, BOOK_ARTIFACTS["current_document"])

        return BookData(
            config=config.value,
            documents=documents.value,
            current_document_id=marker.value.strip() or None,
        )

    async def list_books(self) -> List[BookConfig]:
        """List book configs, most recently modified first."""
        return await self.list_entity_configs(BOOK_ARTIFACTS["config"], BookConfig)

    async def delete_book(self, book_id: str) -> bool:
        """Delete a book and all of its documents; missing books are a no-op."""
        deleted = self.remove_tree(self.get_book_path(book_id))
        if deleted:
            logger.info("Deleted book %s", book_id)
        return deleted

    async def set_current_document(self, book_id: str, document_id: Optional[str]) -> BookData:
        """Point the book at one of its listed documents, or clear the pointer."""
        book = await self.load_book(book_id)
        if document_id and all(doc.id != document_id for doc in book.documents):
            raise EntityNotFoundError("document", document_id)
        book.current_document_id = document_id or None
        await self.save_book(book)
        return book
