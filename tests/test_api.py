"""Integration tests for the ReadCircle API."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from readcircle.domain.models import Book, Review, User, UserBook


async def add_user(session_factory, experience_years: float | None = 1.0) -> User:
    async with session_factory() as session:
        user = User(pen_name=f"reader_{uuid4().hex[:6]}", experience_years=experience_years)
        session.add(user)
        await session.commit()
        return user


async def add_book(session_factory, title: str) -> Book:
    async with session_factory() as session:
        book = Book(title=title, author="Author", language="en", categories=["python"])
        session.add(book)
        await session.commit()
        return book


async def add_review(session_factory, book: Book, difficulty: int, years: float) -> Review:
    reviewer = await add_user(session_factory, years)
    async with session_factory() as session:
        review = Review(
            user_id=reviewer.id,
            book_id=book.id,
            difficulty=difficulty,
            experience_years=years,
            comment="",
        )
        session.add(review)
        await session.commit()
        return review


# ── Health Check ───────────────────────────────────


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


# ── Review Tests ───────────────────────────────────


@pytest.mark.asyncio
async def test_create_review_snapshots_experience(client: AsyncClient, session_factory):
    user = await add_user(session_factory, experience_years=3.5)
    book = await add_book(session_factory, "Fluent Python")

    resp = await client.post(
        f"/books/{book.id}/reviews",
        json={"user_id": str(user.id), "difficulty": 4, "comment": "Dense but rewarding"},
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["difficulty"] == 4
    assert data["experience_years"] == 3.5
    assert data["display_type"] == "user"

    resp = await client.get(f"/books/{book.id}/reviews")
    assert resp.status_code == 200
    assert [r["id"] for r in resp.json()] == [data["id"]]


@pytest.mark.asyncio
async def test_duplicate_review_conflicts(client: AsyncClient, session_factory):
    user = await add_user(session_factory)
    book = await add_book(session_factory, "Once Only")
    payload = {"user_id": str(user.id), "difficulty": 2}

    assert (await client.post(f"/books/{book.id}/reviews", json=payload)).status_code == 201
    resp = await client.post(f"/books/{book.id}/reviews", json=payload)
    assert resp.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize("difficulty", [0, 6])
async def test_review_difficulty_validated(client: AsyncClient, session_factory, difficulty):
    user = await add_user(session_factory)
    book = await add_book(session_factory, "Bounds")

    resp = await client.post(
        f"/books/{book.id}/reviews",
        json={"user_id": str(user.id), "difficulty": difficulty},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_review_unknown_book(client: AsyncClient, session_factory):
    user = await add_user(session_factory)
    resp = await client.post(
        f"/books/{uuid4()}/reviews",
        json={"user_id": str(user.id), "difficulty": 3},
    )
    assert resp.status_code == 404


# ── Recommendation Tests ───────────────────────────


@pytest.mark.asyncio
async def test_recommendations_unknown_user(client: AsyncClient):
    resp = await client.get("/recommendations", params={"user_id": str(uuid4())})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_recommendations_empty_catalogue(client: AsyncClient, session_factory):
    user = await add_user(session_factory)
    resp = await client.get("/recommendations", params={"user_id": str(user.id)})
    assert resp.status_code == 200
    data = resp.json()
    assert data["recommendations"] == []
    assert data["user_experience_level"] == "beginner"
    assert data["has_eligible_books"] is False


@pytest.mark.asyncio
async def test_recommendations_ranked_and_filtered(client: AsyncClient, session_factory):
    user = await add_user(session_factory, experience_years=1)

    easy = await add_book(session_factory, "Easy Start")
    for _ in range(3):
        await add_review(session_factory, easy, difficulty=2, years=1)

    hard = await add_book(session_factory, "Deep Internals")
    await add_review(session_factory, hard, difficulty=5, years=10)

    reviewed = await add_book(session_factory, "Already Reviewed")
    await add_review(session_factory, reviewed, difficulty=2, years=1)
    async with session_factory() as session:
        session.add(Review(user_id=user.id, book_id=reviewed.id, difficulty=2, experience_years=1))
        await session.commit()

    shelved = await add_book(session_factory, "On My Shelf")
    await add_review(session_factory, shelved, difficulty=2, years=1)
    async with session_factory() as session:
        session.add(UserBook(user_id=user.id, book_id=shelved.id))
        await session.commit()

    resp = await client.get("/recommendations", params={"user_id": str(user.id)})
    assert resp.status_code == 200
    data = resp.json()

    titles = [item["book"]["title"] for item in data["recommendations"]]
    assert titles == ["Easy Start", "Deep Internals"]
    assert data["total_books"] == 2
    assert data["has_eligible_books"] is True
    assert data["excluded_books"] == {"reviewed_count": 1, "bookshelf_count": 1}

    top = data["recommendations"][0]
    # 0.4 * 100 + 0.3 * 100 + 0.2 * 100 + 0.1 * 30
    assert top["score"] == 93.0
    assert top["experience_level_match"] == 3
    assert top["reasons"][0] == "Matches reviewers at your experience level"


@pytest.mark.asyncio
async def test_recommendations_pagination(client: AsyncClient, session_factory):
    user = await add_user(session_factory, experience_years=1)
    for i in range(3):
        book = await add_book(session_factory, f"Book {i}")
        for _ in range(i + 1):
            await add_review(session_factory, book, difficulty=2, years=1)

    resp = await client.get(
        "/recommendations", params={"user_id": str(user.id), "limit": 1, "offset": 1}
    )
    assert resp.status_code == 200
    data = resp.json()
    assert [item["book"]["title"] for item in data["recommendations"]] == ["Book 1"]
    assert data["total_books"] == 3


@pytest.mark.asyncio
async def test_recommendations_limit_validated(client: AsyncClient, session_factory):
    user = await add_user(session_factory)
    resp = await client.get("/recommendations", params={"user_id": str(user.id), "limit": 0})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_book_recommendation_without_reviews(client: AsyncClient, session_factory):
    user = await add_user(session_factory, experience_years=5)
    book = await add_book(session_factory, "Unread")

    resp = await client.get(
        f"/books/{book.id}/recommendation", params={"user_id": str(user.id)}
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["scoreable"] is False
    assert data["score"] is None
    assert data["user_experience_level"] == "expert"


@pytest.mark.asyncio
async def test_book_recommendation_scores_single_book(client: AsyncClient, session_factory):
    user = await add_user(session_factory, experience_years=10)
    book = await add_book(session_factory, "Compilers")
    await add_review(session_factory, book, difficulty=5, years=10)

    resp = await client.get(
        f"/books/{book.id}/recommendation", params={"user_id": str(user.id)}
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["scoreable"] is True
    assert data["score"] == 71.0
    assert data["reasons"] == ["Difficulty level is appropriate for you"]
    assert data["review_count"] == 1


@pytest.mark.asyncio
async def test_book_recommendation_unknown_book(client: AsyncClient, session_factory):
    user = await add_user(session_factory)
    resp = await client.get(
        f"/books/{uuid4()}/recommendation", params={"user_id": str(user.id)}
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_recommendations_exclusion_counts_cover_whole_shelf(
    client: AsyncClient, session_factory
):
    user = await add_user(session_factory, experience_years=1)

    unreviewed = await add_book(session_factory, "Shelved, No Reviews")
    both = await add_book(session_factory, "Reviewed And Shelved")
    await add_review(session_factory, both, difficulty=2, years=1)
    candidate = await add_book(session_factory, "Still Recommended")
    await add_review(session_factory, candidate, difficulty=2, years=1)

    async with session_factory() as session:
        session.add(Review(user_id=user.id, book_id=both.id, difficulty=3, experience_years=1))
        session.add(UserBook(user_id=user.id, book_id=unreviewed.id))
        session.add(UserBook(user_id=user.id, book_id=both.id))
        await session.commit()

    resp = await client.get("/recommendations", params={"user_id": str(user.id)})
    assert resp.status_code == 200
    data = resp.json()

    assert data["excluded_books"] == {"reviewed_count": 1, "bookshelf_count": 2}
    assert [item["book"]["title"] for item in data["recommendations"]] == ["Still Recommended"]
    assert data["total_books"] == 1
