from flask import Blueprint, current_app, flash, redirect, request

from . import services
from .models import BOOK_STATUSES
from .services import Redirect
from .templates import (
    AUTHOR_DETAIL_HTML, AUTHOR_FORM_HTML, AUTHOR_LIST_HTML,
    BOOK_DETAIL_HTML, BOOK_FORM_HTML, BOOK_LIST_HTML,
    BOOKINSTANCE_DETAIL_HTML, BOOKINSTANCE_FORM_HTML, BOOKINSTANCE_LIST_HTML,
    DELETE_HTML, GENRE_DETAIL_HTML, GENRE_FORM_HTML, GENRE_LIST_HTML, INDEX_HTML,
    render_template_base,
)

bp = Blueprint('catalog', __name__, url_prefix='/catalog')

# what blocks a delete, per entity kind
DEPENDENT_LABELS = {
    'Author': 'books',
    'Genre': 'books',
    'Book': 'copies',
    'BookInstance': 'records',
}


def get_catalog():
    return current_app.extensions['catalog']


def respond(result, template, **extra):
    """Turn a submission result into a redirect or a re-rendered form."""
    if isinstance(result, Redirect):
        if result.message:
            flash(result.message, "success")
        return redirect(result.location)
    return render_template_base(template, title=result.title, entity=result.entity,
                                errors=result.errors, **result.context, **extra)


def render_delete(confirmation):
    kind = type(confirmation.entity).__name__
    label = getattr(confirmation.entity, 'name', None) or getattr(confirmation.entity, 'title', None) \
        or f"{kind} {confirmation.entity.id}"
    return render_template_base(DELETE_HTML, title=confirmation.title, entity=confirmation.entity,
                                entity_label=label, entity_kind=kind.lower(),
                                dependents=confirmation.dependents,
                                dependent_label=DEPENDENT_LABELS[kind])


# --- Home ---
@bp.route('/')
def index():
    counts = services.catalog_counts(get_catalog())
    return render_template_base(INDEX_HTML, title="Local Library Home", counts=counts)


# --- Authors ---
@bp.route('/authors')
def author_list():
    authors = get_catalog().authors.find()
    return render_template_base(AUTHOR_LIST_HTML, title="Author List", authors=authors)


@bp.route('/author/create', methods=['GET', 'POST'])
def author_create():
    if request.method == 'POST':
        result = services.submit_author(get_catalog(), request.form)
        return respond(result, AUTHOR_FORM_HTML)
    return render_template_base(AUTHOR_FORM_HTML, title="Create Author", entity=None)


@bp.route('/author/<identifier>/delete', methods=['GET', 'POST'])
def author_delete(identifier):
    catalog = get_catalog()
    if request.method == 'POST':
        result = services.delete_entity(catalog.authors, catalog, identifier)
        if isinstance(result, Redirect):
            return respond(result, None)
        return render_delete(result)
    return render_delete(services.delete_confirmation(catalog.authors, catalog, identifier))


@bp.route('/author/<identifier>/update', methods=['GET', 'POST'])
def author_update(identifier):
    catalog = get_catalog()
    if request.method == 'POST':
        result = services.submit_author(catalog, request.form, identifier)
        return respond(result, AUTHOR_FORM_HTML)
    author = catalog.authors.get(identifier)
    return render_template_base(AUTHOR_FORM_HTML, title="Update Author", entity=author)


@bp.route('/author/<identifier>')
def author_detail(identifier):
    author, books = services.author_detail(get_catalog(), identifier)
    return render_template_base(AUTHOR_DETAIL_HTML, title="Author Detail", author=author, books=books)


# --- Genres ---
@bp.route('/genres')
def genre_list():
    genres = get_catalog().genres.find()
    return render_template_base(GENRE_LIST_HTML, title="Genre List", genres=genres)


@bp.route('/genre/create', methods=['GET', 'POST'])
def genre_create():
    if request.method == 'POST':
        result = services.submit_genre(get_catalog(), request.form)
        return respond(result, GENRE_FORM_HTML)
    return render_template_base(GENRE_FORM_HTML, title="Create Genre", entity=None)


@bp.route('/genre/<identifier>/delete', methods=['GET', 'POST'])
def genre_delete(identifier):
    catalog = get_catalog()
    if request.method == 'POST':
        result = services.delete_entity(catalog.genres, catalog, identifier)
        if isinstance(result, Redirect):
            return respond(result, None)
        return render_delete(result)
    return render_delete(services.delete_confirmation(catalog.genres, catalog, identifier))


@bp.route('/genre/<identifier>/update', methods=['GET', 'POST'])
def genre_update(identifier):
    catalog = get_catalog()
    if request.method == 'POST':
        result = services.submit_genre(catalog, request.form, identifier)
        return respond(result, GENRE_FORM_HTML)
    genre = catalog.genres.get(identifier)
    return render_template_base(GENRE_FORM_HTML, title="Update Genre", entity=genre)


@bp.route('/genre/<identifier>')
def genre_detail(identifier):
    genre, books = services.genre_detail(get_catalog(), identifier)
    return render_template_base(GENRE_DETAIL_HTML, title="Genre Detail", genre=genre, books=books)


# --- Books ---
@bp.route('/books')
def book_list():
    books = get_catalog().books.find()
    return render_template_base(BOOK_LIST_HTML, title="Book List", books=books)


@bp.route('/book/create', methods=['GET', 'POST'])
def book_create():
    catalog = get_catalog()
    if request.method == 'POST':
        result = services.submit_book(catalog, request.form)
        return respond(result, BOOK_FORM_HTML)
    return render_template_base(BOOK_FORM_HTML, title="Create Book", entity=None,
                                **services.book_form_context(catalog))


@bp.route('/book/<identifier>/delete', methods=['GET', 'POST'])
def book_delete(identifier):
    catalog = get_catalog()
    if request.method == 'POST':
        result = services.delete_entity(catalog.books, catalog, identifier)
        if isinstance(result, Redirect):
            return respond(result, None)
        return render_delete(result)
    return render_delete(services.delete_confirmation(catalog.books, catalog, identifier))


@bp.route('/book/<identifier>/update', methods=['GET', 'POST'])
def book_update(identifier):
    catalog = get_catalog()
    if request.method == 'POST':
        result = services.submit_book(catalog, request.form, identifier)
        return respond(result, BOOK_FORM_HTML)
    book = catalog.books.get(identifier)
    return render_template_base(BOOK_FORM_HTML, title="Update Book", entity=book,
                                **services.book_form_context(catalog, book))


@bp.route('/book/<identifier>')
def book_detail(identifier):
    book, instances = services.book_detail(get_catalog(), identifier)
    return render_template_base(BOOK_DETAIL_HTML, title=book.title, book=book, instances=instances)


# --- Book instances ---
@bp.route('/bookinstances')
def bookinstance_list():
    instances = get_catalog().instances.find_sorted()
    return render_template_base(BOOKINSTANCE_LIST_HTML, title="Book Instance List", instances=instances)


@bp.route('/bookinstance/create', methods=['GET', 'POST'])
def bookinstance_create():
    catalog = get_catalog()
    if request.method == 'POST':
        result = services.submit_bookinstance(catalog, request.form)
        return respond(result, BOOKINSTANCE_FORM_HTML, statuses=BOOK_STATUSES)
    return render_template_base(BOOKINSTANCE_FORM_HTML, title="Create BookInstance", entity=None,
                                statuses=BOOK_STATUSES, **services.bookinstance_form_context(catalog))


@bp.route('/bookinstance/<identifier>/delete', methods=['GET', 'POST'])
def bookinstance_delete(identifier):
    catalog = get_catalog()
    if request.method == 'POST':
        result = services.delete_entity(catalog.instances, catalog, identifier)
        if isinstance(result, Redirect):
            return respond(result, None)
        return render_delete(result)
    return render_delete(services.delete_confirmation(catalog.instances, catalog, identifier))


@bp.route('/bookinstance/<identifier>/update', methods=['GET', 'POST'])
def bookinstance_update(identifier):
    catalog = get_catalog()
    if request.method == 'POST':
        result = services.submit_bookinstance(catalog, request.form, identifier)
        return respond(result, BOOKINSTANCE_FORM_HTML, statuses=BOOK_STATUSES)
    instance = catalog.instances.get(identifier)
    return render_template_base(BOOKINSTANCE_FORM_HTML, title="Update BookInstance", entity=instance,
                                statuses=BOOK_STATUSES, **services.bookinstance_form_context(catalog))


@bp.route('/bookinstance/<identifier>')
def bookinstance_detail(identifier):
    instance = services.bookinstance_detail(get_catalog(), identifier)
    return render_template_base(BOOKINSTANCE_DETAIL_HTML, title=f"Copy: {instance.book.title}",
                                instance=instance)
