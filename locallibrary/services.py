"""Create/update/delete flows shared by every catalog entity.

Each submission is normalized, validated and only then committed. The
outcome is one of:

* ``Redisplay`` - validation failed, nothing was written; carries the
  candidate entity, the violations and the lists the form needs.
* ``Redirect`` - the write happened (or a matching genre already existed).
* ``BlockedDelete`` - dependents still reference the entity.

Lookups that cannot find their record raise ``errors.NotFound``.
"""
import logging
from dataclasses import dataclass, field

from .forms import AuthorForm, BookForm, BookInstanceForm, GenreForm, collect_violations, normalize_input
from .models import Author, Book, BookInstance, Genre

logger = logging.getLogger(__name__)


@dataclass
class Redisplay:
    title: str
    entity: object
    errors: list
    context: dict = field(default_factory=dict)
    form: object = None


@dataclass
class Redirect:
    location: str
    entity: object = None
    message: str = None


@dataclass
class DeleteConfirmation:
    title: str
    entity: object
    dependents: list

    @property
    def blocked(self):
        return bool(self.dependents)


class BlockedDelete(DeleteConfirmation):
    pass


@dataclass
class GenreOption:
    genre: Genre
    checked: bool = False


# --- Read views ---
def catalog_counts(catalog):
    return {
        'books': catalog.books.count(),
        'book_instances': catalog.instances.count(),
        'book_instances_available': catalog.instances.count_available(),
        'authors': catalog.authors.count(),
        'genres': catalog.genres.count(),
    }


def author_detail(catalog, identifier):
    author = catalog.authors.get(identifier)
    books = catalog.books.find_by_author(author.id, columns=(Book.title, Book.summary))
    return author, books


def genre_detail(catalog, identifier):
    genre = catalog.genres.get(identifier)
    books = catalog.books.find_by_genre(genre.id, columns=(Book.title, Book.summary))
    return genre, books


def book_detail(catalog, identifier):
    book = catalog.books.get(identifier)
    instances = catalog.instances.find_by_book(book.id)
    return book, instances


def bookinstance_detail(catalog, identifier):
    return catalog.instances.get(identifier)


# --- Form context ---
def book_form_context(catalog, book=None):
    selected = {g.id for g in book.genre} if book is not None else set()
    return {
        'authors': catalog.authors.find(),
        'genres': [GenreOption(g, g.id in selected) for g in catalog.genres.find()],
    }


def bookinstance_form_context(catalog):
    return {'books': catalog.books.find(columns=(Book.title,))}


# --- Submissions ---
def _submit(repo, form, build, label, identifier=None, context=None, existing=None):
    pk = repo.get(identifier).id if identifier is not None else None
    title = f"Update {label}" if pk is not None else f"Create {label}"

    valid = form.validate()
    candidate = build(form.sanitized_data(), pk)

    if not valid:
        errors = collect_violations(form)
        logger.info("%s rejected: %d violation(s)", title, len(errors))
        return Redisplay(title, candidate, errors, context or {}, form)

    if pk is None:
        if existing is not None:
            match = existing(candidate)
            if match is not None:
                logger.info("%s already exists as %s, not creating", label, match.id)
                return Redirect(match.url, match)
        entity = repo.insert(candidate)
        return Redirect(entity.url, entity, f"{label} created")
    entity = repo.replace(pk, candidate)
    return Redirect(entity.url, entity, f"{label} updated")


def submit_author(catalog, formdata, identifier=None):
    form = AuthorForm(formdata=normalize_input(formdata))
    return _submit(catalog.authors, form, lambda data, pk: Author.from_form(data, pk),
                   "Author", identifier)


def submit_genre(catalog, formdata, identifier=None):
    form = GenreForm(formdata=normalize_input(formdata))
    return _submit(catalog.genres, form, lambda data, pk: Genre.from_form(data, pk),
                   "Genre", identifier,
                   existing=lambda candidate: catalog.genres.find_by_name_ci(candidate.name))


def submit_book(catalog, formdata, identifier=None):
    form = BookForm(formdata=normalize_input(formdata))
    authors = catalog.authors.find()
    genres = catalog.genres.find()
    form.set_choices(authors, genres)

    def build(data, pk):
        wanted = set(data.get('genre') or [])
        return Book.from_form(data, [g for g in genres if str(g.id) in wanted], pk)

    result = _submit(catalog.books, form, build, "Book", identifier)
    if isinstance(result, Redisplay):
        selected = {g.id for g in result.entity.genre}
        result.context = {
            'authors': authors,
            'genres': [GenreOption(g, g.id in selected) for g in genres],
        }
    return result


def submit_bookinstance(catalog, formdata, identifier=None):
    form = BookInstanceForm(formdata=normalize_input(formdata))
    context = bookinstance_form_context(catalog)
    form.set_choices(context['books'])
    return _submit(catalog.instances, form, lambda data, pk: BookInstance.from_form(data, pk),
                   "BookInstance", identifier, context)


# --- Deletes ---
def _dependents(catalog, entity):
    if isinstance(entity, Author):
        return catalog.books.find_by_author(entity.id, columns=(Book.title, Book.summary))
    if isinstance(entity, Genre):
        return catalog.books.find_by_genre(entity.id, columns=(Book.title, Book.summary))
    if isinstance(entity, Book):
        return catalog.instances.find_by_book(entity.id)
    return []


def delete_confirmation(repo, catalog, identifier):
    entity = repo.get(identifier)
    return DeleteConfirmation(f"Delete {repo.entity_name}", entity, _dependents(catalog, entity))


def delete_entity(repo, catalog, identifier):
    entity = repo.get(identifier)
    dependents = _dependents(catalog, entity)
    if dependents:
        logger.info("Refusing to delete %s %s: %d dependent(s)",
                    repo.entity_name, entity.id, len(dependents))
        return BlockedDelete(f"Delete {repo.entity_name}", entity, dependents)
    repo.delete(entity.id)
    return Redirect(repo.model.list_url, message=f"{repo.entity_name} deleted")
