"""
Unit tests for FAQService against a real (SQLite) session.

Verifies:
- Item ordering on add and import
- Unknown-id delete is a no-op that does not write
- Versioned writes detect a concurrent update
"""

import pytest
from sqlalchemy import update
from sqlalchemy.orm.attributes import set_committed_value

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.college import College
from app.schemas import FAQImport, FAQItemCreate, FAQItemUpdate, FAQReplace
from app.services.faq_service import faq_service


async def add(db, college_id, question, answer="Answer"):
    return await faq_service.add_item(
        db, college_id, FAQItemCreate(question=question, answer=answer)
    )


class TestReadAndReplace:

    async def test_unknown_college(self, db):
        import uuid

        with pytest.raises(NotFoundError):
            await faq_service.get(db, uuid.uuid4())

    async def test_default_is_not_persisted(self, db, college):
        faq = await faq_service.get(db, college.id)
        assert faq.items == []
        stored = await db.get(College, college.id)
        assert stored.faq == []
        assert stored.faq_version == 0

    async def test_replace_fills_ids_and_orders(self, db, college):
        faq = await faq_service.replace(
            db,
            college.id,
            FAQReplace(
                title="Orientation",
                items=[{"question": "Q1", "answer": "A1"}, {"question": "Q2", "answer": "A2"}],
            ),
        )
        assert [i.order for i in faq.items] == [0, 1]
        assert all(i.id.startswith("faq_") for i in faq.items)
        assert (await faq_service.get(db, college.id)).title == "Orientation"

    async def test_replace_rejects_duplicate_ids(self, db, college):
        items = [
            {"id": "faq_1_aaaaaaaaa", "question": "Q1", "answer": "A1"},
            {"id": "faq_1_aaaaaaaaa", "question": "Q2", "answer": "A2"},
        ]
        with pytest.raises(ValidationError):
            await faq_service.replace(db, college.id, FAQReplace(items=items))


class TestItems:

    async def test_add_appends_with_next_order(self, db, college):
        await add(db, college.id, "First?")
        await add(db, college.id, "Second?")
        faq = await add(db, college.id, "Third?")
        assert [i.question for i in faq.items] == ["First?", "Second?", "Third?"]
        assert faq.items[-1].order == 2

    async def test_add_requires_question_and_answer(self, db, college):
        with pytest.raises(ValidationError, match="Question and answer are required"):
            await faq_service.add_item(db, college.id, FAQItemCreate(question="Only a question"))

    async def test_update_merges_fields(self, db, college):
        faq = await add(db, college.id, "Old question?", "Old answer")
        item_id = faq.items[0].id
        faq = await faq_service.update_item(
            db, college.id, item_id, FAQItemUpdate(answer="New answer")
        )
        assert faq.items[0].question == "Old question?"
        assert faq.items[0].answer == "New answer"

    async def test_update_unknown_item(self, db, college):
        await add(db, college.id, "Q?")
        with pytest.raises(NotFoundError, match="FAQ item not found"):
            await faq_service.update_item(db, college.id, "faq_0_missing00", FAQItemUpdate(answer="x"))

    async def test_delete_unknown_item_does_not_write(self, db, college):
        faq = await add(db, college.id, "Q?")
        stored = await db.get(College, college.id)
        version = stored.faq_version

        result = await faq_service.delete_item(db, college.id, "faq_0_missing00")

        assert len(result.items) == 1
        assert result.last_updated == faq.last_updated
        await db.refresh(stored)
        assert stored.faq_version == version

    async def test_delete_item(self, db, college):
        faq = await add(db, college.id, "Keep?")
        faq = await add(db, college.id, "Drop?")
        faq = await faq_service.delete_item(db, college.id, faq.items[1].id)
        assert [i.question for i in faq.items] == ["Keep?"]


class TestImport:

    async def test_import_continues_order_and_strips(self, db, college):
        await add(db, college.id, "Existing?")
        faq = await faq_service.import_items(
            db,
            college.id,
            FAQImport(items=[
                {"question": "  Parking?  ", "answer": " Lot C "},
                {"question": "Wifi?", "answer": "eduroam"},
            ]),
        )
        assert [i.order for i in faq.items] == [0, 1, 2]
        assert faq.items[1].question == "Parking?"
        assert faq.items[1].answer == "Lot C"

    async def test_one_incomplete_item_rejects_batch(self, db, college):
        with pytest.raises(ValidationError, match="Each item must have both question and answer"):
            await faq_service.import_items(
                db,
                college.id,
                FAQImport(items=[
                    {"question": "Fine?", "answer": "Yes"},
                    {"question": "Missing answer?", "answer": "   "},
                ]),
            )
        assert (await faq_service.get(db, college.id)).items == []


class TestVersionedWrites:

    async def test_concurrent_write_is_detected(self, db, college, monkeypatch):
        real_read = faq_service._read

        async def read_then_lose_race(session, college_id):
            row, faq = await real_read(session, college_id)
            seen = row.faq_version
            # Another writer commits between our read and our write
            await session.execute(
                update(College)
                .where(College.id == college_id)
                .values(faq_version=seen + 1)
                .execution_options(synchronize_session=False)
            )
            set_committed_value(row, "faq_version", seen)
            return row, faq

        monkeypatch.setattr(faq_service, "_read", read_then_lose_race)

        with pytest.raises(ConflictError):
            await add(db, college.id, "Lost update?")

        monkeypatch.undo()
        assert (await faq_service.get(db, college.id)).items == []

    async def test_each_write_bumps_version(self, db, college):
        await add(db, college.id, "One?")
        await add(db, college.id, "Two?")
        stored = await db.get(College, college.id)
        assert stored.faq_version == 2
