from datetime import date

import pytest

from locallibrary import create_app
from locallibrary.models import Author, Book, BookInstance, Genre, db


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'WTF_CSRF_ENABLED': False,
        'LOG_LEVEL': 'WARNING',
    })
    with app.test_request_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def catalog(app):
    return app.extensions['catalog']


@pytest.fixture
def author(catalog):
    return catalog.authors.insert(Author(
        first_name="Ursula", family_name="Le Guin",
        date_of_birth=date(1929, 10, 21), date_of_death=date(2018, 1, 22),
    ))


@pytest.fixture
def genre(catalog):
    return catalog.genres.insert(Genre(name="Fantasy"))


@pytest.fixture
def book(catalog, author, genre):
    return catalog.books.insert(Book(
        title="A Wizard of Earthsea", author_id=author.id,
        summary="Ged learns the true names of things.", isbn="9780547773742",
        genre=[genre],
    ))


@pytest.fixture
def instance(catalog, book):
    return catalog.instances.insert(BookInstance(
        book_id=book.id, imprint="Parnassus Press, 1968", status="available",
    ))
