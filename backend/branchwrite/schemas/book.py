"""
Book and Document Data Models / 书籍与文档数据模型
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from branchwrite.schemas.project import DEFAULT_FONT_FAMILY, utc_now


class BookSettings(BaseModel):
    """Book writing settings / 书籍设置"""

    outline_enabled: bool = Field(default=True)
    timeline_enabled: bool = Field(default=True)
    auto_save_interval: int = Field(default=5, ge=0, description="Auto-save interval (minutes)")
    target_word_count: Optional[int] = Field(default=None, ge=0)
    deadline: Optional[datetime] = Field(default=None)
    editor_theme: str = Field(default="focus-writing")
    font_size: int = Field(default=14, ge=0)
    line_height: int = Field(default=24, ge=0)
    font_family: str = Field(default=DEFAULT_FONT_FAMILY)


class BookConfig(BaseModel):
    """Book identity and settings / 书籍配置 (config.json)"""

    id: str = Field(..., description="Book ID (directory name)")
    name: str = Field(..., description="Book name")
    description: str = Field(default="")
    author: str = Field(default="")
    genre: str = Field(default="")
    created_at: datetime = Field(default_factory=utc_now)
    last_modified: datetime = Field(default_factory=utc_now)
    cover_image: Optional[str] = Field(default=None)
    tags: List[str] = Field(default_factory=list)
    settings: BookSettings = Field(default_factory=BookSettings)


class DocumentConfig(BaseModel):
    """Book-scoped document descriptor / 文档配置 (documents.json entry and metadata.json)"""

    id: str = Field(..., description="Document ID (directory name)")
    book_id: str = Field(..., description="Owning book ID")
    title: str = Field(..., description="Document title")
    order: int = Field(..., ge=1, description="1-based insertion sequence; gaps allowed")
    doc_type: str = Field(default="chapter", description="chapter | section | note")
    created_at: datetime = Field(default_factory=utc_now)
    last_modified: datetime = Field(default_factory=utc_now)
    word_count: int = Field(default=0, ge=0)
    character_count: int = Field(default=0, ge=0)
    status: str = Field(default="draft", description="draft | review | final")


class BookData(BaseModel):
    """Full book entity / 书籍数据"""

    config: BookConfig
    documents: List[DocumentConfig] = Field(default_factory=list)
    current_document_id: Optional[str] = Field(default=None)


class BookCreate(BaseModel):
    """Create book request."""

    name: str = Field(..., min_length=1)
    description: str = Field(default="")
    author: str = Field(default="")
    genre: str = Field(default="")


class DocumentCreate(BaseModel):
    """Create document request."""

    title: str = Field(..., min_length=1)
    doc_type: str = Field(default="chapter")


class CurrentDocumentUpdate(BaseModel):
    """Point the book at one of its documents (or clear the pointer)."""

    document_id: Optional[str] = Field(default=None)
