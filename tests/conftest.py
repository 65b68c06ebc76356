import pytest
from fastapi.testclient import TestClient

from core.exceptions import ExtractionError
from infrastructure.file_storage import LocalTempFileStorage
from infrastructure.memory_repositories import InMemoryDocumentRepository, InMemorySuggestionRepository
from main import app
from services.factory import (
    get_document_repository, get_extractor, get_simplifier,
    get_suggestion_repository, get_temp_storage
)

from tests.helpers import StubExtractor, StubSimplifier


@pytest.fixture
def extractor():
    return StubExtractor()


@pytest.fixture
def failing_extractor():
    return StubExtractor(error=ExtractionError("Could not extract text from the document."))


@pytest.fixture
def simplifier():
    return StubSimplifier()


@pytest.fixture
def document_repo():
    return InMemoryDocumentRepository()


@pytest.fixture
def suggestion_repo():
    return InMemorySuggestionRepository()


@pytest.fixture
def temp_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def client(extractor, simplifier, document_repo, suggestion_repo, temp_dir):
    temp_storage = LocalTempFileStorage(temp_dir)
    app.dependency_overrides[get_extractor] = lambda: extractor
    app.dependency_overrides[get_simplifier] = lambda: simplifier
    app.dependency_overrides[get_document_repository] = lambda: document_repo
    app.dependency_overrides[get_suggestion_repository] = lambda: suggestion_repo
    app.dependency_overrides[get_temp_storage] = lambda: temp_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
