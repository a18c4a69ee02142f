"""Repositories: one object per entity type over the SQLAlchemy session.

Every primitive raises ``NotFound`` (or ``InvalidIdentifier``) when a
record cannot be located and ``StorageFailure`` for any other database
error, after rolling the session back.
"""
import logging
from contextlib import contextmanager

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import load_only

from .errors import InvalidIdentifier, NotFound, StorageFailure
from .models import Author, Book, BookInstance, Genre, to_pk

logger = logging.getLogger(__name__)


def parse_identifier(entity, identifier):
    pk = to_pk(identifier.strip() if isinstance(identifier, str) else identifier)
    if pk is None or pk < 1:
        raise InvalidIdentifier(entity, identifier)
    return pk


class EntityRepository:
    model = None
    entity_name = None
    default_order = ()

    def __init__(self, session):
        self.session = session

    @contextmanager
    def _storage(self, action):
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Storage failure while %s %s", action, self.entity_name)
            raise StorageFailure(f"Storage failure while {action} {self.entity_name}", exc) from exc

    # --- reads ---
    def find(self, *filters, order_by=None, columns=None):
        stmt = select(self.model).where(*filters)
        stmt = stmt.order_by(*(self.default_order if order_by is None else order_by))
        if columns:
            stmt = stmt.options(load_only(*columns))
        with self._storage("listing"):
            return list(self.session.scalars(stmt))

    def get(self, identifier):
        pk = parse_identifier(self.entity_name, identifier)
        with self._storage("loading"):
            entity = self.session.get(self.model, pk)
        if entity is None:
            raise NotFound(self.entity_name, identifier)
        return entity

    def count(self, *filters):
        stmt = select(func.count()).select_from(self.model).where(*filters)
        with self._storage("counting"):
            return self.session.scalar(stmt)

    # --- writes ---
    def insert(self, entity):
        with self._storage("inserting"):
            self.session.add(entity)
            self.session.commit()
        logger.info("Created %s %s", self.entity_name, entity.id)
        return entity

    def replace(self, identifier, candidate):
        """Overwrite the stored fields of an existing record with ``candidate``'s."""
        entity = self.get(identifier)
        with self._storage("updating"):
            for name in self.model.replace_fields:
                value = getattr(candidate, name)
                if isinstance(value, list):
                    value = list(value)
                setattr(entity, name, value)
            self.session.commit()
        logger.info("Updated %s %s", self.entity_name, entity.id)
        return entity

    def delete(self, identifier):
        entity = self.get(identifier)
        with self._storage("deleting"):
            self.session.delete(entity)
            self.session.commit()
        logger.info("Deleted %s %s", self.entity_name, identifier)


class AuthorRepository(EntityRepository):
    model = Author
    entity_name = "Author"
    default_order = (Author.family_name, Author.first_name)


class GenreRepository(EntityRepository):
    model = Genre
    entity_name = "Genre"
    default_order = (Genre.name,)

    def find_by_name_ci(self, name):
        stmt = select(Genre).where(Genre.name_key == (name or "").casefold()).limit(1)
        with self._storage("looking up"):
            return self.session.scalars(stmt).first()


class BookRepository(EntityRepository):
    model = Book
    entity_name = "Book"
    default_order = (Book.title,)

    def find_by_author(self, author_id, columns=None):
        pk = parse_identifier("Author", author_id)
        return self.find(Book.author_id == pk, columns=columns)

    def find_by_genre(self, genre_id, columns=None):
        pk = parse_identifier("Genre", genre_id)
        return self.find(Book.genre.any(Genre.id == pk), columns=columns)


class BookInstanceRepository(EntityRepository):
    model = BookInstance
    entity_name = "BookInstance"
    default_order = (BookInstance.id,)

    def find_by_book(self, book_id):
        pk = parse_identifier("Book", book_id)
        return self.find(BookInstance.book_id == pk)

    def find_sorted(self):
        return sorted(self.find(), key=BookInstance.sort_key)

    def count_available(self):
        return self.count(BookInstance.status == 'available')


class Catalog:
    """The four repositories, built once per application."""

    def __init__(self, session):
        self.authors = AuthorRepository(session)
        self.genres = GenreRepository(session)
        self.books = BookRepository(session)
        self.instances = BookInstanceRepository(session)
