from datetime import timedelta

import pytest
import pytest_asyncio

from core.domain import GlossaryTerm, NewDocument
from database.session import create_engine, create_session_factory, init_models
from infrastructure.memory_repositories import InMemoryDocumentRepository, InMemorySuggestionRepository
from infrastructure.repositories import SQLDocumentRepository, SQLSuggestionRepository


def new_document(text="Notice 14/2023 about ration cards.") -> NewDocument:
    return NewDocument(
        original_text=text,
        target_language="mr",
        simplified_text="This notice is about ration cards.",
        glossary=[GlossaryTerm("14/2023", "The notice number.")],
        file_name="notice.jpg",
    )


@pytest_asyncio.fixture(params=["memory", "sql"])
async def repos(request, tmp_path):
    if request.param == "memory":
        yield InMemoryDocumentRepository(ttl_days=7), InMemorySuggestionRepository()
        return

    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_models(engine)
    session_factory = create_session_factory(engine)
    yield SQLDocumentRepository(session_factory, ttl_days=7), SQLSuggestionRepository(session_factory)
    await engine.dispose()


@pytest.mark.asyncio
async def test_create_assigns_id_and_expiry(repos):
    documents, _ = repos

    record = await documents.create(new_document())

    assert record.id
    assert record.expires_at - record.created_at == timedelta(days=7)
    assert record.created_at.tzinfo is not None
    assert record.glossary == [GlossaryTerm("14/2023", "The notice number.")]

    fetched = await documents.get_by_id(record.id)
    assert fetched is not None
    assert fetched.target_language == "mr"
    assert fetched.file_name == "notice.jpg"
    assert fetched.glossary == record.glossary
    assert fetched.created_at == record.created_at


@pytest.mark.asyncio
async def test_list_recent_is_newest_first_and_bounded(repos):
    documents, _ = repos
    for i in range(5):
        await documents.create(new_document(f"document {i}"))

    listed = await documents.list_recent(3)

    assert [d.original_text for d in listed] == ["document 4", "document 3", "document 2"]
    assert all(a.created_at > b.created_at for a, b in zip(listed, listed[1:]))


@pytest.mark.asyncio
async def test_get_unknown_id_returns_none(repos):
    documents, _ = repos

    assert await documents.get_by_id("missing") is None


@pytest.mark.asyncio
async def test_delete_is_idempotent(repos):
    documents, _ = repos
    record = await documents.create(new_document())

    await documents.delete(record.id)
    await documents.delete(record.id)
    await documents.delete("never-existed")

    assert await documents.get_by_id(record.id) is None


@pytest.mark.asyncio
async def test_delete_all_returns_count(repos):
    documents, _ = repos
    for _ in range(4):
        await documents.create(new_document())

    assert await documents.delete_all() == 4
    assert await documents.list_recent(10) == []
    assert await documents.delete_all() == 0


@pytest.mark.asyncio
async def test_suggestions_newest_first(repos):
    _, suggestions = repos
    for message in ["first suggestion", "second suggestion", "third suggestion"]:
        await suggestions.create(message)

    listed = await suggestions.list_recent()

    assert [s.message for s in listed] == ["third suggestion", "second suggestion", "first suggestion"]
    assert [s.message for s in await suggestions.list_recent(1)] == ["third suggestion"]


@pytest.mark.asyncio
async def test_memory_repository_returns_copies():
    documents = InMemoryDocumentRepository()
    record = await documents.create(new_document())

    record.glossary.append(GlossaryTerm("extra", "not stored"))

    fetched = await documents.get_by_id(record.id)
    assert len(fetched.glossary) == 1
