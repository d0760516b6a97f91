"""Book completion workflow: statistics, XP, badges and level-up in one transaction."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rootmarks.books.service import (
    BookAlreadyFinishedError,
    add_book,
    delete_book,
    finish_book,
    get_book,
    update_progress,
)
from rootmarks.db.models import XPLedger
from rootmarks.gamification.badge_service import list_earned_badges
from rootmarks.profiles.service import get_or_create_profile, get_profile

USER_ID = "reader-finish"


@pytest_asyncio.fixture
async def reader(db_session: AsyncSession):
    profile = await get_or_create_profile(db_session, USER_ID)
    await db_session.commit()
    return db_session, profile


async def _shelve(db: AsyncSession, pages: int, title: str = "A Book"):
    book = await add_book(db, USER_ID, title=title, total_pages=pages)
    await db.commit()
    return book


class TestFinishBook:
    @pytest.mark.asyncio
    async def test_first_finish_awards_all_qualifying_badges(self, reader):
        db, profile = reader
        book = await _shelve(db, 300)

        result = await finish_book(db, None, profile, book)

        assert result.xp_gained == 200  # 300 // 2 + 50
        assert {b.slug for b in result.new_badges} == {"first_book", "pages_100"}
        # 200 completion + 50 first_book + 50 pages_100 (unset reward)
        assert result.total_xp == 300
        assert result.level_before == 1
        assert result.level_after == 2
        assert result.leveled_up is True

    @pytest.mark.asyncio
    async def test_book_is_completed(self, reader):
        db, profile = reader
        book = await _shelve(db, 120)
        await update_progress(db, book, 30)
        await db.commit()

        result = await finish_book(db, None, profile, book)

        assert result.book.status == "finished"
        assert result.book.pages_read == 120
        assert result.book.progress == 100
        assert result.book.finished_at is not None

    @pytest.mark.asyncio
    async def test_statistics_updated(self, reader):
        db, profile = reader
        await finish_book(db, None, profile, await _shelve(db, 300))
        await finish_book(db, None, profile, await _shelve(db, 800))

        stored = await get_profile(db, USER_ID)
        assert stored.total_books_read == 2
        assert stored.total_pages_read == 1100

    @pytest.mark.asyncio
    async def test_second_book_awards_only_new_badges(self, reader):
        db, profile = reader
        await finish_book(db, None, profile, await _shelve(db, 300))

        result = await finish_book(db, None, profile, await _shelve(db, 800))

        assert [b.slug for b in result.new_badges] == ["pages_1000"]
        assert result.xp_gained == 450
        assert result.total_xp == 300 + 450 + 100
        assert result.level_after == 3

    @pytest.mark.asyncio
    async def test_already_finished_is_rejected(self, reader):
        db, profile = reader
        book = await _shelve(db, 100)
        await finish_book(db, None, profile, book)

        with pytest.raises(BookAlreadyFinishedError):
            await finish_book(db, None, profile, book)

        stored = await get_profile(db, USER_ID)
        assert stored.total_books_read == 1

    @pytest.mark.asyncio
    async def test_progress_rejected_after_finish(self, reader):
        db, profile = reader
        book = await _shelve(db, 100)
        await finish_book(db, None, profile, book)

        with pytest.raises(BookAlreadyFinishedError):
            await update_progress(db, book, 10)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", [
        "rootmarks.gamification.trigger_engine.award_badge",
        "rootmarks.books.service.grant_xp",
    ])
    async def test_failure_mid_workflow_rolls_back(self, reader, target):
        db, profile = reader
        book = await _shelve(db, 300)
        await update_progress(db, book, 40)
        await db.commit()
        book_id = book.id

        with patch(target, AsyncMock(side_effect=RuntimeError("write failed"))):
            with pytest.raises(RuntimeError):
                await finish_book(db, None, profile, book)

        stored_book = await get_book(db, USER_ID, book_id)
        assert stored_book.status == "reading"
        assert stored_book.pages_read == 40
        assert stored_book.finished_at is None

        stored = await get_profile(db, USER_ID)
        assert stored.total_books_read == 0
        assert stored.total_pages_read == 0
        assert stored.experience_points == 0

        ledger = await db.execute(
            select(func.count()).select_from(XPLedger).where(XPLedger.user_id == USER_ID)
        )
        assert ledger.scalar_one() == 0
        assert await list_earned_badges(db, USER_ID) == []

    @pytest.mark.asyncio
    async def test_ledger_has_one_entry_per_credit(self, reader):
        db, profile = reader
        book = await _shelve(db, 300)
        await finish_book(db, None, profile, book)

        entries = (await db.execute(
            select(XPLedger).where(XPLedger.user_id == USER_ID).order_by(XPLedger.id)
        )).scalars().all()
        assert [e.idempotency_key for e in entries] == [
            f"book:{book.id}:finished",
            f"badge:first_book:{USER_ID}",
            f"badge:pages_100:{USER_ID}",
        ]
        assert sum(e.amount for e in entries) == 300

    @pytest.mark.asyncio
    async def test_no_badge_when_nothing_new_qualifies(self, reader):
        db, profile = reader
        await finish_book(db, None, profile, await _shelve(db, 300))

        result = await finish_book(db, None, profile, await _shelve(db, 10))

        assert result.new_badges == []
        assert result.xp_gained == 55
        assert len(await list_earned_badges(db, USER_ID)) == 2

    @pytest.mark.asyncio
    async def test_badge_events_published(self, reader):
        db, profile = reader
        redis = MagicMock()
        redis.publish = AsyncMock(return_value=1)

        await finish_book(db, redis, profile, await _shelve(db, 300))

        assert redis.publish.await_count == 2

    @pytest.mark.asyncio
    async def test_delete_keeps_statistics(self, reader):
        db, profile = reader
        book = await _shelve(db, 300)
        await finish_book(db, None, profile, book)

        await delete_book(db, book)
        await db.commit()

        stored = await get_profile(db, USER_ID)
        assert stored.total_books_read == 1
        assert stored.total_pages_read == 300
        assert stored.experience_points == 300


class TestShelfRules:
    @pytest.mark.asyncio
    async def test_add_defaults(self, reader):
        db, _ = reader
        book = await add_book(db, USER_ID, title="  Dune ", total_pages=412, author="  ")
        assert book.title == "Dune"
        assert book.author == "Unknown Author"
        assert book.status == "reading"
        assert (book.pages_read, book.progress, book.rating) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_add_rejects_blank_title(self, reader):
        db, _ = reader
        with pytest.raises(ValueError, match="Title"):
            await add_book(db, USER_ID, title="   ", total_pages=10)

    @pytest.mark.asyncio
    async def test_progress_clamped(self, reader):
        db, _ = reader
        book = await _shelve(db, 200)
        await update_progress(db, book, 500)
        assert book.pages_read == 200
        assert book.progress == 100
        assert book.status == "reading"

    @pytest.mark.asyncio
    async def test_negative_progress_rejected(self, reader):
        db, _ = reader
        book = await _shelve(db, 200)
        with pytest.raises(ValueError):
            await update_progress(db, book, -1)
