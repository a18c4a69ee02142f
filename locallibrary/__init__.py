"""Local Library: a Flask catalog of authors, genres, books and their copies.

Run:
    pip install -e .
    flask --app locallibrary init-db --sample
    flask --app locallibrary run

Open http://127.0.0.1:5000/catalog/
"""
import logging
from datetime import date, timedelta

import click
from flask import Flask, redirect, url_for
from flask.cli import with_appcontext
from flask_wtf import CSRFProtect
from werkzeug.exceptions import NotFound as HTTPNotFound

from .config import configure_logging, default_config
from .errors import NotFound, StorageFailure
from .models import Author, Book, BookInstance, Genre, db
from .repository import Catalog
from .templates import ERROR_HTML, render_template_base

logger = logging.getLogger(__name__)

csrf = CSRFProtect()


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.update(default_config())
    if test_config is not None:
        app.config.update(test_config)

    configure_logging(app.config['LOG_LEVEL'])

    db.init_app(app)
    csrf.init_app(app)
    # one set of repositories for the lifetime of the app
    app.extensions['catalog'] = Catalog(db.session)

    from .views import bp
    app.register_blueprint(bp)

    @app.route('/')
    def home():
        return redirect(url_for('catalog.index'))

    register_error_handlers(app)
    app.cli.add_command(init_db_command)
    return app


def register_error_handlers(app):
    @app.errorhandler(NotFound)
    def entity_not_found(e):
        logger.info("Not found: %s %r", e.entity, e.identifier)
        return render_template_base(ERROR_HTML, title="Not Found", message=str(e)), 404

    @app.errorhandler(HTTPNotFound)
    def page_not_found(e):
        return render_template_base(ERROR_HTML, title="Not Found",
                                    message="The requested page was not found."), 404

    @app.errorhandler(StorageFailure)
    def storage_failure(e):
        return render_template_base(ERROR_HTML, title="Error",
                                    message="The catalog could not complete this request."), 500


# --- CLI helper ---
def seed_sample_data():
    austen = Author(first_name="Jane", family_name="Austen",
                    date_of_birth=date(1775, 12, 16), date_of_death=date(1817, 7, 18))
    twain = Author(first_name="Mark", family_name="Twain",
                   date_of_birth=date(1835, 11, 30), date_of_death=date(1910, 4, 21))
    fiction = Genre(name="Fiction")
    satire = Genre(name="Satire")
    pride = Book(title="Pride and Prejudice", author=austen, isbn="9780141439518",
                 summary="A classic novel of manners.", genre=[fiction])
    finn = Book(title="Adventures of Huckleberry Finn", author=twain, isbn="9780486280615",
                summary="A boy and an escaped slave travel down the Mississippi.",
                genre=[fiction, satire])
    copies = [
        BookInstance(book=pride, imprint="Penguin Classics, 2003", status="available"),
        BookInstance(book=finn, imprint="Dover, 1994", status="loaned",
                     due_back=date.today() + timedelta(days=14)),
    ]
    db.session.add_all([austen, twain, fiction, satire, pride, finn, *copies])
    db.session.commit()


@click.command("init-db")
@click.option("--sample", is_flag=True, help="Add sample authors, genres, books and copies.")
@with_appcontext
def init_db_command(sample):
    """Create the catalog tables."""
    db.create_all()
    if sample:
        if db.session.query(Author).first() is None:
            seed_sample_data()
            click.echo("Initialized DB with sample data.")
        else:
            click.echo("DB already has data; sample not added.")
    else:
        click.echo("Initialized DB.")
