"""Persistence tests for the poem library and key-value store."""
import asyncio
import json
from datetime import datetime, timedelta, timezone

import pytest

from dal.key_value_dal import KeyValueDAL
from dal.poem_library_dal import LIBRARY_KEY, PoemLibraryDAL
from models.saved_poem import SavedPoemRecord
from utils.database_init import AsyncDatabaseInitializer

BASE_TIME = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def library(db_initializer):
    return PoemLibraryDAL(db_initializer)


def save_many(library, count):
    async def run():
        for index in range(count):
            await library.create_poem(f"poem {index}", now=BASE_TIME + timedelta(minutes=index))
        return await library.list_saved_poems()

    return asyncio.run(run())


def test_empty_library(library):
    assert asyncio.run(library.list_saved_poems()) == []


def test_save_n_poems_lists_n_newest_first(library):
    poems = save_many(library, 5)

    assert len(poems) == 5
    assert [p.poem for p in poems] == ["poem 4", "poem 3", "poem 2", "poem 1", "poem 0"]
    created = [p.created_at for p in poems]
    assert created == sorted(created, reverse=True)


def test_list_sorts_by_created_at_even_when_stored_out_of_order(library):
    async def run():
        await library.save_poem(SavedPoemRecord(id=1, poem="older", created_at=BASE_TIME))
        await library.save_poem(SavedPoemRecord(id=2, poem="oldest", created_at=BASE_TIME - timedelta(days=1)))
        return await library.list_saved_poems()

    assert [p.poem for p in asyncio.run(run())] == ["older", "oldest"]


def test_create_poem_records_fields(library):
    before = datetime.now(timezone.utc)
    record = asyncio.run(
        library.create_poem(
            "three\nshort\nlines",
            title="  Dawn  ",
            inspiration="A quiet dawn over still water.",
            image_preview="data:image/png;base64,AAAA",
        )
    )
    after = datetime.now(timezone.utc)

    assert record.title == "Dawn"
    assert record.inspiration == "A quiet dawn over still water."
    assert record.image_preview == "data:image/png;base64,AAAA"
    assert before <= record.created_at <= after
    assert asyncio.run(library.get_poem(record.id)) == record


def test_blank_title_is_stored_as_absent(library):
    record = asyncio.run(library.create_poem("verse", title="   "))
    assert record.title is None


@pytest.mark.parametrize("poem", ["", "   \n  "])
def test_empty_poem_is_rejected(library, poem):
    with pytest.raises(ValueError):
        asyncio.run(library.create_poem(poem))
    assert asyncio.run(library.list_saved_poems()) == []


def test_ids_are_unique_within_the_same_millisecond(library):
    async def run():
        first = await library.create_poem("a", now=BASE_TIME)
        second = await library.create_poem("b", now=BASE_TIME)
        third = await library.create_poem("c", now=BASE_TIME)
        return first, second, third

    records = asyncio.run(run())
    assert len({r.id for r in records}) == 3
    assert records[0].id == int(BASE_TIME.timestamp() * 1000)


def test_overlapping_saves_keep_every_poem(library):
    async def run():
        created = await asyncio.gather(
            library.create_poem("a", now=BASE_TIME),
            library.create_poem("b", now=BASE_TIME),
            library.create_poem("c", now=BASE_TIME),
        )
        return created, await library.list_saved_poems()

    created, listed = asyncio.run(run())

    assert len({r.id for r in created}) == 3
    assert sorted(p.poem for p in listed) == ["a", "b", "c"]


def test_delete_overlapping_a_save_keeps_the_new_poem(library):
    existing = save_many(library, 2)

    async def run():
        await asyncio.gather(
            library.delete_poem(existing[0].id),
            library.create_poem("fresh", now=BASE_TIME + timedelta(hours=1)),
        )
        return await library.list_saved_poems()

    assert [p.poem for p in asyncio.run(run())] == ["fresh", "poem 0"]


def test_delete_removes_only_that_record(library):
    poems = save_many(library, 4)
    target = poems[1]

    assert asyncio.run(library.delete_poem(target.id)) is True
    remaining = asyncio.run(library.list_saved_poems())

    assert [p.id for p in remaining] == [p.id for p in poems if p.id != target.id]


def test_delete_unknown_id_is_noop(library):
    poems = save_many(library, 2)

    assert asyncio.run(library.delete_poem(123)) is False
    assert asyncio.run(library.list_saved_poems()) == poems


def test_storage_is_versioned_and_newest_first(library, db_initializer):
    save_many(library, 2)
    raw = asyncio.run(KeyValueDAL(db_initializer).get(LIBRARY_KEY))
    document = json.loads(raw)

    assert document["schemaVersion"] == 1
    assert [p["poem"] for p in document["poems"]] == ["poem 1", "poem 0"]
    assert set(document["poems"][0]) == {"id", "title", "poem", "inspiration", "imagePreview", "createdAt"}


def test_corrupt_document_reads_as_empty(library, db_initializer):
    asyncio.run(KeyValueDAL(db_initializer).set(LIBRARY_KEY, "{not json"))
    assert asyncio.run(library.list_saved_poems()) == []


def test_unknown_schema_version_reads_as_empty(library, db_initializer):
    asyncio.run(KeyValueDAL(db_initializer).set(LIBRARY_KEY, json.dumps({"schemaVersion": 99, "poems": []})))
    assert asyncio.run(library.list_saved_poems()) == []


def test_legacy_array_is_upgraded_and_bad_records_skipped(library, db_initializer):
    legacy = [
        {
            "id": 1760000000000,
            "title": "Harbor",
            "poem": "boats asleep",
            "inspiration": None,
            "image": "data:image/jpeg;base64,AAAA",
            "date": "2025-10-09T08:53:20.000Z",
        },
        {"id": 1760000000001, "poem": "", "date": "2025-10-09T09:00:00.000Z"},
        "garbage",
    ]
    asyncio.run(KeyValueDAL(db_initializer).set(LIBRARY_KEY, json.dumps(legacy)))

    poems = asyncio.run(library.list_saved_poems())

    assert len(poems) == 1
    assert poems[0].title == "Harbor"
    assert poems[0].image_preview == "data:image/jpeg;base64,AAAA"
    assert poems[0].created_at == datetime(2025, 10, 9, 8, 53, 20, tzinfo=timezone.utc)


def test_library_survives_a_new_initializer(library, db_dir):
    save_many(library, 1)
    reopened = PoemLibraryDAL(AsyncDatabaseInitializer())
    assert len(asyncio.run(reopened.list_saved_poems())) == 1


def test_reset_on_start_wipes_the_database(library):
    save_many(library, 1)
    wiped = PoemLibraryDAL(AsyncDatabaseInitializer(reset_on_start=True))
    assert asyncio.run(wiped.list_saved_poems()) == []


def test_missing_database_dir_is_a_configuration_error(monkeypatch):
    monkeypatch.delenv("DATABASE_DIR", raising=False)
    with pytest.raises(RuntimeError, match="DATABASE_DIR"):
        AsyncDatabaseInitializer()


def test_key_value_delete(db_initializer):
    store = KeyValueDAL(db_initializer)

    async def run():
        await store.set("k", "v1")
        await store.set("k", "v2")
        value = await store.get("k")
        deleted = await store.delete("k")
        return value, deleted, await store.get("k"), await store.delete("k")

    assert asyncio.run(run()) == ("v2", True, None, False)
