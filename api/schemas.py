# api/schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from core.domain import DocumentRecord, GlossaryTerm, SimplifiedDocument, SuggestionRecord


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GlossaryTermModel(CamelModel):
    term: str
    definition: str = ""

    @classmethod
    def from_domain(cls, item: GlossaryTerm) -> "GlossaryTermModel":
        return cls(term=item.term, definition=item.definition)

    def to_domain(self) -> GlossaryTerm:
        return GlossaryTerm(term=self.term, definition=self.definition)


class SimplifyRequest(CamelModel):
    image_base64: Optional[str] = None
    language: str = "en"
    file_name: Optional[str] = None


class SimplifyResponse(CamelModel):
    original_text: str
    simplified_text: str
    glossary: List[GlossaryTermModel]
    target_language: str

    @classmethod
    def from_domain(cls, result: SimplifiedDocument) -> "SimplifyResponse":
        return cls(
            original_text=result.original_text,
            simplified_text=result.simplified_text,
            glossary=[GlossaryTermModel.from_domain(g) for g in result.glossary],
            target_language=result.target_language,
        )


class ExportRequest(CamelModel):
    """Body of the download endpoints: a full simplification result."""
    original_text: Optional[str] = None
    simplified_text: str
    glossary: List[GlossaryTermModel] = []
    target_language: str = "en"


class DocumentResponse(CamelModel):
    id: str
    original_text: str
    simplified_text: Optional[str] = None
    target_language: str
    glossary: List[GlossaryTermModel]
    file_name: Optional[str] = None
    created_at: datetime
    expires_at: datetime

    @classmethod
    def from_domain(cls, record: DocumentRecord) -> "DocumentResponse":
        return cls(
            id=record.id,
            original_text=record.original_text,
            simplified_text=record.simplified_text,
            target_language=record.target_language,
            glossary=[GlossaryTermModel.from_domain(g) for g in record.glossary],
            file_name=record.file_name,
            created_at=record.created_at,
            expires_at=record.expires_at,
        )


class SuggestionCreate(CamelModel):
    message: str


class SuggestionResponse(CamelModel):
    id: str
    message: str
    created_at: datetime

    @classmethod
    def from_domain(cls, record: SuggestionRecord) -> "SuggestionResponse":
        return cls(id=record.id, message=record.message, created_at=record.created_at)


class SuccessResponse(CamelModel):
    success: bool = True


class BulkDeleteResponse(CamelModel):
    success: bool = True
    deleted_count: int


class LanguageItem(CamelModel):
    code: str
    name: str
    native_name: str


class HealthResponse(CamelModel):
    status: str
    storage: str
    ocr_engine: str
    llm_model: str
    llm_configured: bool
