"""Form rule sets for the four catalog entities.

Submissions go through three stages: ``normalize_input`` shapes the raw
request values, the form validates them (collected with
``collect_violations``), and ``sanitized_data`` yields the escaped values
a candidate entity is built from.
"""
from dataclasses import dataclass
from datetime import datetime

import bleach
from dateutil.parser import parse as dateparse
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import DateField, SelectField, SelectMultipleField, StringField, TextAreaField
from wtforms.validators import AnyOf, DataRequired, Length, Optional as OptionalValidator, ValidationError

from .models import BOOK_STATUSES, DEFAULT_STATUS

MULTI_VALUE_FIELDS = ('genre',)


@dataclass(frozen=True)
class Violation:
    field: str
    message: str


# --- Input normalization ---
def as_sequence(value):
    """Coerce a possibly-singular selection into a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def normalize_input(formdata, multi_fields=MULTI_VALUE_FIELDS):
    """Return ``formdata`` as a MultiDict with selection fields as lists."""
    if formdata is None:
        return MultiDict()
    if hasattr(formdata, 'getlist'):
        items = [(key, formdata.getlist(key)) for key in formdata.keys()]
    else:
        items = list(formdata.items())
    normalized = MultiDict()
    for key, value in items:
        values = as_sequence(value)
        if key not in multi_fields and len(values) > 1:
            values = values[:1]
        for item in values:
            normalized.add(key, item)
    return normalized


# --- Filters / sanitizers ---
def strip_filter(value):
    return value.strip() if isinstance(value, str) else value


def lowercase_filter(value):
    return value.lower() if isinstance(value, str) else value


def default_status_filter(value):
    return value or DEFAULT_STATUS


def sanitize(value):
    """Escape markup-significant characters in submitted text."""
    if isinstance(value, str):
        return bleach.clean(value, tags=[], strip=False)
    if isinstance(value, list):
        return [sanitize(v) for v in value]
    return value


# two unrelated defaults: a date missing any part parses differently under each
_FILL_A = datetime(2000, 1, 1)
_FILL_B = datetime(2001, 2, 2)


def parse_calendar_date(value):
    """Parse an ISO calendar date, falling back to a full written-out date.

    Partial dates ("1", "March 5") are rejected rather than completed
    from today's date.
    """
    s = value.strip()
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        pass
    try:
        first = dateparse(s, default=_FILL_A).date()
        second = dateparse(s, default=_FILL_B).date()
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Unparseable date: {s!r}") from exc
    if first != second:
        raise ValueError(f"Incomplete date: {s!r}")
    return first


class CalendarDateField(DateField):
    """Date input that accepts blank (no value) and reports a custom message."""

    def __init__(self, label=None, validators=None, invalid_message="Invalid date", **kwargs):
        super().__init__(label, validators, format="%Y-%m-%d", **kwargs)
        self.invalid_message = invalid_message

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        raw = " ".join(valuelist).strip()
        if not raw:
            self.data = None
            return
        try:
            self.data = parse_calendar_date(raw)
        except ValueError:
            self.data = None
            raise ValueError(self.invalid_message)


def _require_choice(message):
    def _check(form, field):
        allowed = {str(value) for value, _label in (field.choices or [])}
        values = field.data if isinstance(field.data, list) else [field.data]
        if any(str(v) not in allowed for v in values):
            raise ValidationError(message)
    return _check


# --- Forms ---
class CatalogForm(FlaskForm):
    def sanitized_data(self):
        return {
            field.name: sanitize(field.data)
            for field in self
            if field.name != 'csrf_token'
        }


class AuthorForm(CatalogForm):
    first_name = StringField('First Name', filters=[strip_filter], validators=[
        Length(min=1, message="First name must be specified."),
        Length(max=100, message="First name must be at most 100 characters."),
    ])
    family_name = StringField('Family Name', filters=[strip_filter], validators=[
        Length(min=1, message="Family name must be specified."),
        Length(max=100, message="Family name must be at most 100 characters."),
    ])
    date_of_birth = CalendarDateField('Date of birth', validators=[OptionalValidator()],
                                      invalid_message="Invalid date of birth")
    date_of_death = CalendarDateField('Date of death', validators=[OptionalValidator()],
                                      invalid_message="Invalid date of death")


class GenreForm(CatalogForm):
    name = StringField('Genre', filters=[strip_filter], validators=[
        Length(min=3, message="Genre name must contain at least 3 characters"),
        Length(max=100, message="Genre name must be at most 100 characters"),
    ])


class BookForm(CatalogForm):
    title = StringField('Title', filters=[strip_filter], validators=[
        Length(min=1, message="Title must not be empty."),
    ])
    author = SelectField('Author', choices=[], validate_choice=False, filters=[strip_filter], validators=[
        DataRequired(message="Author must not be empty."),
        _require_choice("Author must be an existing author."),
    ])
    summary = TextAreaField('Summary', filters=[strip_filter], validators=[
        Length(min=1, message="Summary must not be empty."),
    ])
    isbn = StringField('ISBN', filters=[strip_filter], validators=[
        Length(min=1, message="ISBN must not be empty"),
    ])
    genre = SelectMultipleField('Genre', choices=[], validate_choice=False, validators=[
        _require_choice("Genre selection contains an unknown genre."),
    ])

    def set_choices(self, authors, genres):
        self.author.choices = [(str(a.id), a.name) for a in authors]
        self.genre.choices = [(str(g.id), g.name) for g in genres]


class BookInstanceForm(CatalogForm):
    book = SelectField('Book', choices=[], validate_choice=False, filters=[strip_filter], validators=[
        DataRequired(message="Book must be specified"),
        _require_choice("Book must be an existing book."),
    ])
    imprint = StringField('Imprint', filters=[strip_filter], validators=[
        Length(min=1, message="Imprint must be specified"),
    ])
    status = SelectField('Status', choices=[(s, s.capitalize()) for s in BOOK_STATUSES],
                         default=DEFAULT_STATUS, validate_choice=False,
                         filters=[strip_filter, lowercase_filter, default_status_filter],
                         validators=[AnyOf(BOOK_STATUSES, message="Invalid status")])
    due_back = CalendarDateField('Date when book available', validators=[OptionalValidator()],
                                 invalid_message="Invalid date")

    def set_choices(self, books):
        self.book.choices = [(str(b.id), b.title) for b in books]


def collect_violations(form):
    """Every field error, in the order the fields were declared."""
    return [
        Violation(field.name, message)
        for field in form
        for message in field.errors
    ]
