"""Book shelf router: all /api/v1/books/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from rootmarks.auth.dependencies import get_current_profile
from rootmarks.books.lookup import GoogleBooksClient, get_book_lookup
from rootmarks.books.schemas import (
    AwardedBadgeResponse,
    BookCreateRequest,
    BookListResponse,
    BookResponse,
    BookSearchResponse,
    BookSearchResult,
    FinishBookResponse,
    ProgressUpdateRequest,
    RatingUpdateRequest,
)
from rootmarks.books.service import (
    BookAlreadyFinishedError,
    add_book,
    delete_book,
    finish_book,
    get_book,
    list_books,
    rate_book,
    update_progress,
)
from rootmarks.database import get_session
from rootmarks.db.models import BadgeDefinition, Book, Profile
from rootmarks.dependencies import get_redis_dep
from rootmarks.gamification.badge_service import badge_xp_reward
from rootmarks.gamification.level_thresholds import compute_level

router = APIRouter(prefix="/api/v1/books", tags=["Books"])


def _book_response(book: Book) -> BookResponse:
    return BookResponse(
        id=book.id,
        title=book.title,
        author=book.author,
        total_pages=book.total_pages,
        pages_read=book.pages_read,
        progress=book.progress,
        rating=book.rating,
        status=book.status,
        cover_url=book.cover_url,
        created_at=book.created_at,
        finished_at=book.finished_at,
    )


def _awarded_response(badge: BadgeDefinition) -> AwardedBadgeResponse:
    return AwardedBadgeResponse(
        slug=badge.slug,
        name=badge.name,
        description=badge.description,
        icon=badge.icon,
        difficulty=badge.difficulty,
        xp_reward=badge_xp_reward(badge),
    )


async def _owned_book(db: AsyncSession, profile: Profile, book_id: int) -> Book:
    book = await get_book(db, profile.id, book_id)
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@router.get("/search", response_model=BookSearchResponse)
async def search_books(
    q: str = Query("", max_length=256),
    profile: Profile = Depends(get_current_profile),
    lookup: GoogleBooksClient = Depends(get_book_lookup),
) -> BookSearchResponse:
    """Look up candidate books in the external catalog."""
    try:
        results = await lookup.search(q)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return BookSearchResponse(results=[BookSearchResult(**r) for r in results])


# ---------------------------------------------------------------------------
# Shelf
# ---------------------------------------------------------------------------


@router.post("", response_model=BookResponse, status_code=201)
async def create_book(
    body: BookCreateRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> BookResponse:
    """Add a book to the shelf."""
    try:
        book = await add_book(
            db,
            profile.id,
            title=body.title,
            total_pages=body.total_pages,
            author=body.author,
            cover_url=body.cover_url,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _book_response(book)


@router.get("", response_model=BookListResponse)
async def get_my_books(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> BookListResponse:
    """List the shelf, newest first."""
    books = await list_books(db, profile.id)
    return BookListResponse(books=[_book_response(b) for b in books], total=len(books))


@router.get("/{book_id}", response_model=BookResponse)
async def get_my_book(
    book_id: int,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> BookResponse:
    return _book_response(await _owned_book(db, profile, book_id))


@router.patch("/{book_id}/progress", response_model=BookResponse)
async def update_book_progress(
    book_id: int,
    body: ProgressUpdateRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> BookResponse:
    """Record pages read. Values past the last page are clamped."""
    book = await _owned_book(db, profile, book_id)
    try:
        book = await update_progress(db, book, body.pages_read)
    except BookAlreadyFinishedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _book_response(book)


@router.put("/{book_id}/rating", response_model=BookResponse)
async def update_book_rating(
    book_id: int,
    body: RatingUpdateRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> BookResponse:
    """Rate a book from 0 (unrated) to 5."""
    book = await _owned_book(db, profile, book_id)
    try:
        book = await rate_book(db, book, body.rating)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _book_response(book)


@router.post("/{book_id}/finish", response_model=FinishBookResponse)
async def finish_my_book(
    book_id: int,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
) -> FinishBookResponse:
    """Finish a book, credit XP and award any newly earned badges."""
    book = await _owned_book(db, profile, book_id)
    try:
        result = await finish_book(db, redis, profile, book)
    except BookAlreadyFinishedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    return FinishBookResponse(
        book=_book_response(result.book),
        xp_gained=result.xp_gained,
        total_xp=result.total_xp,
        level_before=result.level_before,
        level_after=result.level_after,
        level_title=compute_level(result.total_xp)["title"],
        leveled_up=result.leveled_up,
        new_badges=[_awarded_response(b) for b in result.new_badges],
    )


@router.delete("/{book_id}", status_code=204)
async def delete_my_book(
    book_id: int,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Remove a book. Reading statistics are not reduced."""
    book = await _owned_book(db, profile, book_id)
    await delete_book(db, book)
    await db.commit()
    return Response(status_code=204)
