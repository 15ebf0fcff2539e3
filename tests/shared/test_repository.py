"""Tests for shared/repository.py."""

import pytest
from pydantic import BaseModel

from shared.documents import DocumentSnapshot
from shared.exceptions import TransactionConflictError
from shared.repository import BaseRepository
from tests.conftest import seed


class Note(BaseModel):
    id: str
    text: str


class NoteRepository(BaseRepository[Note]):
    collection = "notes"

    def _map_to_model(self, snapshot: DocumentSnapshot) -> Note:
        return Note(id=snapshot.id, **snapshot.data)


class TestBaseRepository:
    """Tests for BaseRepository base class."""

    def test_init_stores_document_store(self, store):
        repo = NoteRepository(store)
        assert repo._store is store

    @pytest.mark.asyncio
    async def test_get_maps_document(self, store):
        await seed(store, "notes", "n1", {"text": "hallo"})
        repo = NoteRepository(store)

        note = await repo.get("n1")

        assert note == Note(id="n1", text="hallo")

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store):
        assert await NoteRepository(store).get("missing") is None

    @pytest.mark.asyncio
    async def test_get_inside_transaction_records_read(self, store):
        await seed(store, "notes", "n1", {"text": "hallo"})
        repo = NoteRepository(store)

        tx = store.transaction()
        await repo.get("n1", tx)
        await seed(store, "notes", "n1", {"text": "changed"})
        tx.set("notes", "n2", {"text": "other"})

        with pytest.raises(TransactionConflictError):
            await tx.commit()

    def test_document_data_excludes_id(self):
        data = BaseRepository._document_data(Note(id="n1", text="hallo"))
        assert data == {"text": "hallo"}

    @pytest.mark.asyncio
    async def test_base_mapping_not_implemented(self, store):
        class Bare(BaseRepository[dict]):
            collection = "notes"

        await seed(store, "notes", "n1", {"text": "hallo"})
        with pytest.raises(NotImplementedError):
            await Bare(store).get("n1")
