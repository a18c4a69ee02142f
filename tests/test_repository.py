import pytest
from sqlalchemy.exc import OperationalError

from locallibrary.errors import InvalidIdentifier, NotFound, StorageFailure
from locallibrary.models import Author, Book, Genre
from locallibrary.repository import parse_identifier


@pytest.mark.parametrize("identifier", ["abc", "", "0", "-1", "1.0", "507f1f77bcf86cd799439011", None,
                                        "99999999999999999999", 2 ** 63])
def test_parse_identifier_rejects_malformed(identifier):
    with pytest.raises(InvalidIdentifier):
        parse_identifier("Author", identifier)


def test_parse_identifier_accepts_digits():
    assert parse_identifier("Author", " 42 ") == 42
    assert parse_identifier("Author", 7) == 7


def test_get_distinguishes_malformed_and_missing(catalog):
    with pytest.raises(InvalidIdentifier):
        catalog.authors.get("not-an-id")
    with pytest.raises(NotFound) as excinfo:
        catalog.authors.get("999")
    assert not isinstance(excinfo.value, InvalidIdentifier)


def test_find_uses_default_order(catalog):
    catalog.authors.insert(Author(first_name="Zadie", family_name="Smith"))
    catalog.authors.insert(Author(first_name="Iain", family_name="Banks"))
    catalog.authors.insert(Author(first_name="Ali", family_name="Smith"))
    assert [a.name for a in catalog.authors.find()] == ["Banks, Iain", "Smith, Ali", "Smith, Zadie"]


def test_genre_lookup_is_case_insensitive(catalog, genre):
    assert catalog.genres.find_by_name_ci("FANTASY").id == genre.id
    assert catalog.genres.find_by_name_ci("Horror") is None


def test_genre_lookup_folds_non_ascii_case(catalog):
    epic = catalog.genres.insert(Genre(name="Épopée"))
    assert catalog.genres.find_by_name_ci("ÉPOPÉE").id == epic.id
    assert catalog.genres.find_by_name_ci("épopée").id == epic.id


def test_genre_lookup_follows_renames(catalog, genre):
    catalog.genres.replace(genre.id, Genre(name="Straße"))
    assert catalog.genres.find_by_name_ci("STRASSE").id == genre.id
    assert catalog.genres.find_by_name_ci("fantasy") is None


def test_dependents_lookups(catalog, author, genre, book, instance):
    assert [b.id for b in catalog.books.find_by_author(author.id)] == [book.id]
    assert [b.id for b in catalog.books.find_by_genre(genre.id)] == [book.id]
    assert [c.id for c in catalog.instances.find_by_book(book.id)] == [instance.id]


def test_counts(catalog, instance):
    assert catalog.books.count() == 1
    assert catalog.instances.count() == 1
    assert catalog.instances.count_available() == 1
    assert catalog.genres.count(Genre.name == "Poetry") == 0


def test_replace_overwrites_stored_fields(catalog, book):
    poetry = catalog.genres.insert(Genre(name="Poetry"))
    candidate = Book(id=book.id, title="Earthsea", author_id=book.author_id,
                     summary="New", isbn="1", genre=[poetry])
    updated = catalog.books.replace(str(book.id), candidate)
    assert updated.id == book.id
    assert updated.title == "Earthsea"
    assert [g.name for g in updated.genre] == ["Poetry"]
    assert catalog.books.count() == 1


def test_replace_missing_record_does_not_insert(catalog):
    with pytest.raises(NotFound):
        catalog.authors.replace("12", Author(first_name="A", family_name="B"))
    assert catalog.authors.count() == 0


def test_delete(catalog, author):
    catalog.authors.delete(author.id)
    with pytest.raises(NotFound):
        catalog.authors.get(author.id)


class BrokenSession:
    def __init__(self):
        self.rolled_back = False

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    get = scalars = scalar = add = commit = _fail

    def rollback(self):
        self.rolled_back = True


def test_storage_errors_are_wrapped(catalog, monkeypatch):
    broken = BrokenSession()
    monkeypatch.setattr(catalog.authors, "session", broken)
    with pytest.raises(StorageFailure):
        catalog.authors.get("1")
    with pytest.raises(StorageFailure):
        catalog.authors.find()
    assert broken.rolled_back
