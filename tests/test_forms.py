from datetime import date

import pytest
from werkzeug.datastructures import MultiDict

from locallibrary.forms import (
    AuthorForm, BookForm, BookInstanceForm, GenreForm, Violation,
    as_sequence, collect_violations, normalize_input, parse_calendar_date, sanitize,
)


class Choice:
    def __init__(self, id, name):
        self.id = id
        self.name = name
        self.title = name


@pytest.mark.parametrize("value, expected", [
    (None, []),
    ("3", ["3"]),
    (["3", "4"], ["3", "4"]),
    (("5",), ["5"]),
])
def test_as_sequence(value, expected):
    assert as_sequence(value) == expected


def test_normalize_input_from_plain_mapping():
    data = normalize_input({"title": "Dune", "genre": "2"})
    assert data.getlist("genre") == ["2"]
    assert data["title"] == "Dune"

    assert normalize_input({"title": "Dune"}).getlist("genre") == []
    assert normalize_input({"genre": ["1", "2"]}).getlist("genre") == ["1", "2"]
    assert normalize_input(None) == MultiDict()


def test_normalize_input_keeps_multidict_values():
    data = normalize_input(MultiDict([("genre", "1"), ("genre", "2"), ("title", "x")]))
    assert data.getlist("genre") == ["1", "2"]
    assert data.getlist("title") == ["x"]


def test_sanitize_escapes_markup():
    assert sanitize("<b>Bold</b> & co") == "&lt;b&gt;Bold&lt;/b&gt; &amp; co"
    assert sanitize(["<i>x</i>"]) == ["&lt;i&gt;x&lt;/i&gt;"]
    assert sanitize(date(2020, 1, 1)) == date(2020, 1, 1)
    assert sanitize(None) is None


def test_parse_calendar_date():
    assert parse_calendar_date("1929-10-21") == date(1929, 10, 21)
    assert parse_calendar_date("21 October 1929") == date(1929, 10, 21)
    with pytest.raises(ValueError):
        parse_calendar_date("not a date")


@pytest.mark.parametrize("value", ["1", "March 5", "1929", "October 1929"])
def test_parse_calendar_date_rejects_partial_dates(value):
    with pytest.raises(ValueError):
        parse_calendar_date(value)


def test_author_form_reports_every_field_in_order(app):
    form = AuthorForm(formdata=MultiDict({
        "first_name": "  ", "family_name": "", "date_of_birth": "nonsense",
    }))
    assert not form.validate()
    assert collect_violations(form) == [
        Violation("first_name", "First name must be specified."),
        Violation("family_name", "Family name must be specified."),
        Violation("date_of_birth", "Invalid date of birth"),
    ]


def test_author_form_trims_and_accepts_blank_dates(app):
    form = AuthorForm(formdata=MultiDict({
        "first_name": "  Ursula ", "family_name": "Le Guin", "date_of_birth": "", "date_of_death": "",
    }))
    assert form.validate()
    data = form.sanitized_data()
    assert data["first_name"] == "Ursula"
    assert data["date_of_birth"] is None
    assert data["date_of_death"] is None


def test_author_form_max_length(app):
    form = AuthorForm(formdata=MultiDict({"first_name": "x" * 101, "family_name": "y"}))
    assert not form.validate()
    assert [v.field for v in collect_violations(form)] == ["first_name"]


@pytest.mark.parametrize("name, valid", [
    ("ab", False),
    ("  ab  ", False),
    ("abc", True),
    ("x" * 100, True),
    ("x" * 101, False),
])
def test_genre_name_length(app, name, valid):
    form = GenreForm(formdata=MultiDict({"name": name}))
    assert form.validate() is valid


def test_genre_form_message(app):
    form = GenreForm(formdata=MultiDict({"name": "ab"}))
    form.validate()
    assert collect_violations(form) == [
        Violation("name", "Genre name must contain at least 3 characters"),
    ]


def test_book_form_requires_fields_and_known_references(app):
    form = BookForm(formdata=normalize_input({"author": "99", "genre": "7"}))
    form.set_choices([Choice(1, "Le Guin, Ursula")], [Choice(2, "Fantasy")])
    assert not form.validate()
    assert collect_violations(form) == [
        Violation("title", "Title must not be empty."),
        Violation("author", "Author must be an existing author."),
        Violation("summary", "Summary must not be empty."),
        Violation("isbn", "ISBN must not be empty"),
        Violation("genre", "Genre selection contains an unknown genre."),
    ]


def test_book_form_missing_author(app):
    form = BookForm(formdata=normalize_input({"title": "t", "summary": "s", "isbn": "i"}))
    form.set_choices([Choice(1, "Le Guin, Ursula")], [])
    assert not form.validate()
    assert collect_violations(form) == [Violation("author", "Author must not be empty.")]


def test_book_form_valid_with_single_genre(app):
    form = BookForm(formdata=normalize_input({
        "title": "Dune", "author": "1", "summary": "Spice", "isbn": "123", "genre": "2",
    }))
    form.set_choices([Choice(1, "Herbert, Frank")], [Choice(2, "Science Fiction")])
    assert form.validate()
    assert form.sanitized_data()["genre"] == ["2"]


def test_bookinstance_form_status_casefold_and_default(app):
    form = BookInstanceForm(formdata=MultiDict({"book": "1", "imprint": "Ace", "status": "LOANED"}))
    form.set_choices([Choice(1, "Dune")])
    assert form.validate()
    assert form.sanitized_data()["status"] == "loaned"

    form = BookInstanceForm(formdata=MultiDict({"book": "1", "imprint": "Ace"}))
    form.set_choices([Choice(1, "Dune")])
    assert form.validate()
    assert form.sanitized_data()["status"] == "maintenance"
    assert form.sanitized_data()["due_back"] is None


def test_bookinstance_form_rejects_unknown_status_and_bad_date(app):
    form = BookInstanceForm(formdata=MultiDict({
        "book": "", "imprint": "", "status": "lost", "due_back": "soon",
    }))
    form.set_choices([Choice(1, "Dune")])
    assert not form.validate()
    assert collect_violations(form) == [
        Violation("book", "Book must be specified"),
        Violation("imprint", "Imprint must be specified"),
        Violation("status", "Invalid status"),
        Violation("due_back", "Invalid date"),
    ]
