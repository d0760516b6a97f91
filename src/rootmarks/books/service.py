"""Book shelf business logic and the book completion workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select

from rootmarks.db.models import BadgeDefinition, Book, BookStatus, Profile
from rootmarks.gamification.level_thresholds import compute_level
from rootmarks.gamification.trigger_engine import TriggerEngine
from rootmarks.gamification.xp_service import grant_xp
from rootmarks.profiles.service import get_profile

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

UNKNOWN_AUTHOR = "Unknown Author"
COMPLETION_BASE_XP = 50


class BookAlreadyFinishedError(Exception):
    """The book is finished; finished books cannot change progress or be finished again."""

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Book {book_id} is already finished")
        self.book_id = book_id


@dataclass
class FinishResult:
    book: Book
    xp_gained: int
    total_xp: int
    level_before: int
    level_after: int
    new_badges: list[BadgeDefinition] = field(default_factory=list)

    @property
    def leveled_up(self) -> bool:
        return self.level_after > self.level_before


def compute_progress(pages_read: int, total_pages: int) -> int:
    """Percentage read, rounded half up. 0 when the page count is not positive."""
    if total_pages <= 0:
        return 0
    return (pages_read * 200 + total_pages) // (total_pages * 2)


def completion_xp(total_pages: int) -> int:
    """XP for finishing a book: half a point per page (floored) plus a flat 50."""
    return total_pages // 2 + COMPLETION_BASE_XP


async def add_book(
    db: AsyncSession,
    user_id: str,
    title: str,
    total_pages: int,
    author: str | None = None,
    cover_url: str | None = None,
) -> Book:
    """
    Put a new book on the reader's shelf.

    Raises:
        ValueError: If the title is blank or the page count is not positive.
    """
    title = title.strip()
    if not title:
        msg = "Title cannot be blank"
        raise ValueError(msg)
    if total_pages < 1:
        msg = "Total pages must be at least 1"
        raise ValueError(msg)

    book = Book(
        user_id=user_id,
        title=title,
        author=(author or "").strip() or UNKNOWN_AUTHOR,
        total_pages=total_pages,
        pages_read=0,
        progress=0,
        rating=0,
        status=BookStatus.READING.value,
        cover_url=cover_url,
        created_at=datetime.now(timezone.utc),
    )
    db.add(book)
    await db.flush()

    logger.info("book_added", user_id=user_id, book_id=book.id, total_pages=total_pages)
    return book


async def list_books(db: AsyncSession, user_id: str) -> list[Book]:
    """The reader's books, newest first."""
    result = await db.execute(
        select(Book)
        .where(Book.user_id == user_id)
        .order_by(Book.created_at.desc(), Book.id.desc())
    )
    return list(result.scalars().all())


async def get_book(db: AsyncSession, user_id: str, book_id: int) -> Book | None:
    """Fetch one of the reader's books. Books owned by someone else are not found."""
    result = await db.execute(
        select(Book).where(Book.id == book_id, Book.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def update_progress(db: AsyncSession, book: Book, pages_read: int) -> Book:
    """
    Record pages read, clamped to the book's length.

    Raises:
        ValueError: If pages_read is negative.
        BookAlreadyFinishedError: If the book is finished.
    """
    if pages_read < 0:
        msg = "Pages read cannot be negative"
        raise ValueError(msg)
    if book.status == BookStatus.FINISHED.value:
        raise BookAlreadyFinishedError(book.id)

    book.pages_read = min(pages_read, book.total_pages)
    book.progress = compute_progress(book.pages_read, book.total_pages)
    await db.flush()
    return book


async def rate_book(db: AsyncSession, book: Book, rating: int) -> Book:
    """
    Set the rating (0 clears it).

    Raises:
        ValueError: If the rating is outside 0-5.
    """
    if not 0 <= rating <= 5:
        msg = "Rating must be between 0 and 5"
        raise ValueError(msg)

    book.rating = rating
    await db.flush()
    return book


async def delete_book(db: AsyncSession, book: Book) -> None:
    """Remove a book. Reading statistics already credited are kept."""
    await db.delete(book)
    await db.flush()
    logger.info("book_deleted", user_id=book.user_id, book_id=book.id)


async def finish_book(
    db: AsyncSession,
    redis: object,
    profile: Profile,
    book: Book,
) -> FinishResult:
    """
    Mark a book finished and run the reward pipeline in one transaction.

    1. Lock the book and profile rows
    2. Complete the book and update reading statistics
    3. Credit completion XP through the ledger
    4. Evaluate and award every newly qualifying badge
    5. Commit

    Raises:
        BookAlreadyFinishedError: If the book was already finished.
    """
    await db.refresh(book, with_for_update=True)
    if book.status == BookStatus.FINISHED.value:
        raise BookAlreadyFinishedError(book.id)

    try:
        locked = await get_profile(db, profile.id, for_update=True)
        if locked is None:
            msg = f"Profile {profile.id} not found"
            raise LookupError(msg)
        profile = locked
        level_before = compute_level(profile.experience_points)["level"]

        now = datetime.now(timezone.utc)
        book.pages_read = book.total_pages
        book.progress = 100
        book.status = BookStatus.FINISHED.value
        book.finished_at = now

        xp_gained = completion_xp(book.total_pages)
        profile.total_books_read += 1
        profile.total_pages_read += book.total_pages
        profile.updated_at = now

        await grant_xp(
            db=db,
            user_id=profile.id,
            amount=xp_gained,
            source="book",
            source_id=str(book.id),
            description=f'Finished "{book.title}"',
            idempotency_key=f"book:{book.id}:finished",
        )

        new_badges = await TriggerEngine(db, redis).evaluate(profile)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    result = FinishResult(
        book=book,
        xp_gained=xp_gained,
        total_xp=profile.experience_points,
        level_before=level_before,
        level_after=compute_level(profile.experience_points)["level"],
        new_badges=new_badges,
    )
    logger.info(
        "book_finished",
        user_id=profile.id,
        book_id=book.id,
        xp_gained=xp_gained,
        badges=[b.slug for b in new_badges],
        leveled_up=result.leveled_up,
    )
    return result
