import locale
from datetime import date, datetime, time, timedelta

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.orm import validates

db = SQLAlchemy()

BOOK_STATUSES = ('available', 'maintenance', 'loaned', 'reserved')
DEFAULT_STATUS = 'maintenance'

# largest value an INTEGER primary key can hold
MAX_PK = 2 ** 63 - 1


def collation_key(value):
    """Sort key approximating a locale-aware string comparison."""
    return locale.strxfrm((value or "").casefold())


def to_pk(value):
    """Return ``value`` as an integer key, or None when it cannot be one."""
    if isinstance(value, int) and not isinstance(value, bool):
        pk = value
    elif isinstance(value, str) and value.isascii() and value.isdecimal():
        pk = int(value)
    else:
        return None
    return pk if pk <= MAX_PK else None


def _as_datetime(value):
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return value


def _format_date_med(value):
    # "Oct 6, 2026"
    return f"{value:%b} {value.day}, {value.year}"


book_genres = db.Table(
    'book_genres',
    db.Column('book_id', db.Integer, db.ForeignKey('books.id'), primary_key=True),
    db.Column('genre_id', db.Integer, db.ForeignKey('genres.id'), primary_key=True),
)


# --- Models ---
class Author(db.Model):
    __tablename__ = 'authors'
    list_url = '/catalog/authors'
    replace_fields = ('first_name', 'family_name', 'date_of_birth', 'date_of_death')

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    family_name = db.Column(db.String(100), nullable=False, index=True)
    date_of_birth = db.Column(db.Date)
    date_of_death = db.Column(db.Date)

    @classmethod
    def from_form(cls, data, identifier=None):
        return cls(
            id=identifier,
            first_name=data.get('first_name'),
            family_name=data.get('family_name'),
            date_of_birth=data.get('date_of_birth'),
            date_of_death=data.get('date_of_death'),
        )

    @property
    def name(self):
        if self.first_name and self.family_name:
            return f"{self.family_name}, {self.first_name}"
        return ""

    @property
    def year_of_birth(self):
        return self.date_of_birth.year if self.date_of_birth else None

    @property
    def year_of_death(self):
        return self.date_of_death.year if self.date_of_death else None

    @property
    def lifespan(self):
        birth = self.year_of_birth or ""
        death = self.year_of_death or ""
        return f"{birth} - {death}"

    @property
    def date_of_birth_for_html(self):
        return self.date_of_birth.isoformat() if self.date_of_birth else ""

    @property
    def date_of_death_for_html(self):
        return self.date_of_death.isoformat() if self.date_of_death else ""

    @property
    def url(self):
        return f"/catalog/author/{self.id}"

    def sort_key(self):
        return (collation_key(self.family_name), collation_key(self.first_name))


class Genre(db.Model):
    __tablename__ = 'genres'
    list_url = '/catalog/genres'
    replace_fields = ('name',)

    # uniqueness is checked case-insensitively before insert, not by the store
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    # casefolded copy of name, kept in step by _track_name_key
    name_key = db.Column(db.String(200), nullable=False, index=True)

    @validates('name')
    def _track_name_key(self, key, value):
        self.name_key = (value or "").casefold()
        return value

    @classmethod
    def from_form(cls, data, identifier=None):
        return cls(id=identifier, name=data.get('name'))

    @property
    def url(self):
        return f"/catalog/genre/{self.id}"

    def sort_key(self):
        return collation_key(self.name)


class Book(db.Model):
    __tablename__ = 'books'
    list_url = '/catalog/books'
    replace_fields = ('title', 'author_id', 'summary', 'isbn', 'genre')

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(250), nullable=False, index=True)
    author_id = db.Column(db.Integer, db.ForeignKey('authors.id'), nullable=False)
    summary = db.Column(db.Text, nullable=False)
    isbn = db.Column(db.String(50), nullable=False)

    # no back-references: dependents are looked up through the repositories
    author = db.relationship('Author')
    genre = db.relationship('Genre', secondary=book_genres, order_by='Genre.name')

    @classmethod
    def from_form(cls, data, genres=(), identifier=None):
        return cls(
            id=identifier,
            title=data.get('title'),
            author_id=to_pk(data.get('author')),
            summary=data.get('summary'),
            isbn=data.get('isbn'),
            genre=list(genres),
        )

    @property
    def url(self):
        return f"/catalog/book/{self.id}"

    def sort_key(self):
        return collation_key(self.title)


class BookInstance(db.Model):
    __tablename__ = 'book_instances'
    list_url = '/catalog/bookinstances'
    replace_fields = ('book_id', 'imprint', 'status', 'due_back')
    __table_args__ = (
        db.CheckConstraint(
            "status IN ('available', 'maintenance', 'loaned', 'reserved')",
            name='ck_book_instance_status',
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    book_id = db.Column(db.Integer, db.ForeignKey('books.id'), nullable=False, index=True)
    imprint = db.Column(db.String(250), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=DEFAULT_STATUS, index=True)
    due_back = db.Column(db.DateTime, nullable=False, default=datetime.now)

    book = db.relationship('Book')

    def __init__(self, **kwargs):
        # defaults apply at construction so a redisplayed form shows them too
        if not kwargs.get('status'):
            kwargs['status'] = DEFAULT_STATUS
        if kwargs.get('due_back') is None:
            kwargs['due_back'] = datetime.now()
        super().__init__(**kwargs)

    @validates('status')
    def _lowercase_status(self, key, value):
        return (value or DEFAULT_STATUS).lower()

    @validates('due_back')
    def _coerce_due_back(self, key, value):
        return _as_datetime(value)

    @classmethod
    def from_form(cls, data, identifier=None):
        return cls(
            id=identifier,
            book_id=to_pk(data.get('book')),
            imprint=data.get('imprint'),
            status=data.get('status'),
            due_back=data.get('due_back'),
        )

    @property
    def url(self):
        return f"/catalog/bookinstance/{self.id}"

    @property
    def due_back_formatted(self):
        return _format_date_med(self.due_back + timedelta(days=1))

    @property
    def due_back_for_html(self):
        return self.due_back.date().isoformat()

    def sort_key(self):
        return collation_key(self.book.title if self.book else "")
