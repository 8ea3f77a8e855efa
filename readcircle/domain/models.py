"""SQLAlchemy ORM models."""

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, relationship

from readcircle.domain.scoring import ReviewSnapshot


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    pen_name = Column(String(100), nullable=False)
    experience_years = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    reviews = relationship("Review", back_populates="user")
    shelf = relationship("UserBook", back_populates="user")


class Book(Base):
    __tablename__ = "books"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    isbn = Column(String(20), unique=True, nullable=True)
    title = Column(String(500), nullable=False, index=True)
    author = Column(String(300), nullable=False, default="")
    language = Column(String(20), nullable=False, default="")
    categories = Column(JSON, default=list)
    img_url = Column(String(1000), nullable=False, default="")
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    reviews = relationship("Review", back_populates="book")


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_review_user_book"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    book_id = Column(Uuid, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    difficulty = Column(Integer, nullable=False)
    # Reviewer's experience at the time of writing, not their current profile.
    experience_years = Column(Float, nullable=False, default=0.0)
    comment = Column(Text, nullable=False, default="")
    display_type = Column(
        Enum("anon", "user", "custom", name="review_display_type_enum"),
        nullable=False,
        default="user",
    )
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="reviews")
    book = relationship("Book", back_populates="reviews")

    def to_snapshot(self) -> ReviewSnapshot:
        return ReviewSnapshot(
            book_id=self.book_id,
            difficulty=self.difficulty,
            experience_years=self.experience_years or 0.0,
            created_at=self.created_at,
        )


class UserBook(Base):
    __tablename__ = "user_books"
    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_user_book"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    book_id = Column(Uuid, ForeignKey("books.id", ondelete="CASCADE"), nullable=False)
    added_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="shelf")
    book = relationship("Book")
