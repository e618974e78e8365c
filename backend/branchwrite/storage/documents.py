"""
Document Storage
Book-scoped documents: content body plus a DocumentConfig metadata file.

Layout::

    <root>/books/<book_id>/documents/<doc_id>/
        content.md       document body
        metadata.json    DocumentConfig
        commits/         reserved for per-document versioning, unused
"""

import uuid
from pathlib import Path
from typing import Dict, List, Optional

from branchwrite.exceptions import EntityNotFoundError
from branchwrite.schemas.book import DocumentConfig
from branchwrite.schemas.project import utc_now
from branchwrite.storage.base import Artifact, ArtifactPolicy, BaseStorage
from branchwrite.storage.books import BookStorage
from branchwrite.utils.logger import get_logger
from branchwrite.utils.path_safety import validate_entity_id
from branchwrite.utils.text import count_characters, count_words

logger = get_logger(__name__)

DOCUMENT_ARTIFACTS: Dict[str, Artifact] = {
    "content": Artifact("document content", "content.md", ArtifactPolicy.OPTIONAL),
    "metadata": Artifact("document metadata", "metadata.json", ArtifactPolicy.REQUIRED),
    "commits": Artifact("document commits", "commits", ArtifactPolicy.OPTIONAL),
}


def next_order(documents: List[DocumentConfig]) -> int:
    """
    Next 1-based insertion sequence.

    Equals ``len(documents) + 1`` while nothing was deleted. After a delete
    the surviving orders are kept as they are, so the next value continues
    after the highest one instead of reusing a taken number.
    """
    return max((doc.order for doc in documents), default=0) + 1


class DocumentStorage(BaseStorage):
    """File-based storage for documents that belong to a book."""

    collection = "books"
    entity_kind = "document"

    def __init__(self, data_dir: Optional[str] = None):
        super().__init__(data_dir)
        self.book_storage = BookStorage(data_dir)

    def get_document_path(self, book_id: str, document_id: str) -> Path:
        validate_entity_id(document_id, "document")
        return self.book_storage.get_documents_dir(book_id) / document_id

    async def create_document(self, book_id: str, title: str, doc_type: str = "chapter") -> DocumentConfig:
        """
        Create a document and append it to its book.

        Two entities change here. The document's own files are written
        first, then the parent book list is saved. If the book save fails
        the document directory is left behind unlisted; making both steps
        atomic would need a write-ahead log or staging + rename.
        """
        book = await self.book_storage.load_book(book_id)
        now = utc_now()

        document = DocumentConfig(
            id=str(uuid.uuid4()),
            book_id=book_id,
            title=title,
            order=next_order(book.documents),
            doc_type=doc_type,
            created_at=now,
            last_modified=now,
            word_count=0,
            character_count=0,
            status="draft",
        )

        doc_dir = self.ensure_dir(self.get_document_path(book_id, document.id))
        await self.write_text(doc_dir / DOCUMENT_ARTIFACTS["content"].filename, "")
        await self.write_json(
            doc_dir / DOCUMENT_ARTIFACTS["metadata"].filename,
            document.model_dump(mode="json"),
        )
        self.ensure_dir(doc_dir / DOCUMENT_ARTIFACTS["commits"].filename)

        book.documents.append(document)
        await self.book_storage.save_book(book)
        logger.info("Created document %s in book %s (order %d)", document.id, book_id, document.order)
        return document

    async def load_content(self, book_id: str, document_id: str) -> str:
        """Return the document body, or an empty string when there is none yet."""
        doc_dir = self.get_document_path(book_id, document_id)
        content = await self.load_text_artifact(doc_dir, DOCUMENT_ARTIFACTS["content"])
        return content.value

    async def save_content(self, book_id: str, document_id: str, content: str) -> Optional[DocumentConfig]:
        """
        Overwrite the body and refresh counts in metadata.json.

        Without a metadata file the body is still saved but no statistics
        are updated; None is returned in that case.
        """
        doc_dir = self.get_document_path(book_id, document_id)
        if not doc_dir.is_dir():
            raise EntityNotFoundError("document", document_id)

        await self.write_text(doc_dir / DOCUMENT_ARTIFACTS["content"].filename, content)

        metadata_artifact = DOCUMENT_ARTIFACTS["metadata"]
        if not (doc_dir / metadata_artifact.filename).is_file():
            logger.debug("No metadata for document %s, statistics not updated", document_id)
            return None

        metadata = await self.load_json_artifact(doc_dir, metadata_artifact, DocumentConfig)
        document = metadata.value
        document.last_modified = utc_now()
        document.character_count = count_characters(content)
        document.word_count = count_words(content)
        await self.write_json(doc_dir / metadata_artifact.filename, document.model_dump(mode="json"))
        return document

    async def list_documents(self, book_id: str) -> List[DocumentConfig]:
        """The book's own document list is the source of truth, not a directory scan."""
        book = await self.book_storage.load_book(book_id)
        return book.documents

    async def delete_document(self, book_id: str, document_id: str) -> None:
        """Remove the document directory, then drop it from the book."""
        self.remove_tree(self.get_document_path(book_id, document_id))

        book = await self.book_storage.load_book(book_id)
        book.documents = [doc for doc in book.documents if doc.id != document_id]
        if book.current_document_id == document_id:
            book.current_document_id = None
        await self.book_storage.save_book(book)
        logger.info("Deleted document %s from book %s", document_id, book_id)
