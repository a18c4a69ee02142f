from flask import current_app, render_template_string
from markupsafe import Markup

# --------------------
# HTML Templates (inline)
# --------------------
BASE_HTML = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ title }} | Local Library</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.0/dist/css/bootstrap.min.css" rel="stylesheet">
  <style>
    .status-available { color: #198754; }
    .status-maintenance { color: #dc3545; }
    .status-loaned, .status-reserved { color: #fd7e14; }
  </style>
</head>
<body>
<div class="container-fluid py-4">
  <div class="row">
    <div class="col-sm-2">
      <ul class="nav flex-column">
        <li class="nav-item"><a class="nav-link" href="{{ url_for('catalog.index') }}">Home</a></li>
        <li class="nav-item"><a class="nav-link" href="{{ url_for('catalog.book_list') }}">All books</a></li>
        <li class="nav-item"><a class="nav-link" href="{{ url_for('catalog.author_list') }}">All authors</a></li>
        <li class="nav-item"><a class="nav-link" href="{{ url_for('catalog.genre_list') }}">All genres</a></li>
        <li class="nav-item"><a class="nav-link" href="{{ url_for('catalog.bookinstance_list') }}">All book-instances</a></li>
        <li><hr></li>
        <li class="nav-item"><a class="nav-link" href="{{ url_for('catalog.author_create') }}">Create new author</a></li>
        <li class="nav-item"><a class="nav-link" href="{{ url_for('catalog.genre_create') }}">Create new genre</a></li>
        <li class="nav-item"><a class="nav-link" href="{{ url_for('catalog.book_create') }}">Create new book</a></li>
        <li class="nav-item"><a class="nav-link" href="{{ url_for('catalog.bookinstance_create') }}">Create new book instance (copy)</a></li>
      </ul>
    </div>
    <div class="col-sm-10">
      {% with messages = get_flashed_messages(with_categories=true) %}
        {% for cat, msg in messages %}
          <div class="alert alert-{{ cat }}" role="alert">{{ msg }}</div>
        {% endfor %}
      {% endwith %}
      <h1>{{ title }}</h1>
      {% block content %}{% endblock %}
    </div>
  </div>
</div>
</body>
</html>
"""

ERRORS_HTML = """
{% if errors %}
  <ul class="text-danger">
    {% for error in errors %}<li>{{ error.message }}</li>{% endfor %}
  </ul>
{% endif %}
"""

INDEX_HTML = """
{% extends base %}
{% block content %}
  <p>Welcome to <em>LocalLibrary</em>.</p>
  <h2>Dynamic content</h2>
  <p>The library has the following record counts:</p>
  <ul>
    <li><strong>Books:</strong> {{ counts.books }}</li>
    <li><strong>Copies:</strong> {{ counts.book_instances }}</li>
    <li><strong>Copies available:</strong> {{ counts.book_instances_available }}</li>
    <li><strong>Authors:</strong> {{ counts.authors }}</li>
    <li><strong>Genres:</strong> {{ counts.genres }}</li>
  </ul>
{% endblock %}
"""

ERROR_HTML = """
{% extends base %}
{% block content %}
  <p>{{ message }}</p>
{% endblock %}
"""

# --- Authors ---
AUTHOR_LIST_HTML = """
{% extends base %}
{% block content %}
  <ul>
  {% for author in authors %}
    <li><a href="{{ author.url }}">{{ author.name }}</a> ({{ author.lifespan }})</li>
  {% else %}
    <li>There are no authors.</li>
  {% endfor %}
  </ul>
{% endblock %}
"""

AUTHOR_DETAIL_HTML = """
{% extends base %}
{% block content %}
  <h2>{{ author.name }}</h2>
  <p>{{ author.lifespan }}</p>
  <h4>Books</h4>
  <dl>
  {% for book in books %}
    <dt><a href="{{ book.url }}">{{ book.title }}</a></dt>
    <dd>{{ book.summary }}</dd>
  {% else %}
    <p>This author has no books.</p>
  {% endfor %}
  </dl>
  <hr>
  <a href="{{ author.url }}/delete">Delete author</a> |
  <a href="{{ author.url }}/update">Update author</a>
{% endblock %}
"""

AUTHOR_FORM_HTML = """
{% extends base %}
{% block content %}
  <form method="post">
    <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
    <div class="mb-2">
      <label class="form-label" for="first_name">First Name:</label>
      <input class="form-control" id="first_name" name="first_name" maxlength="100"
             value="{{ entity.first_name if entity and entity.first_name else '' }}">
      <label class="form-label" for="family_name">Family Name:</label>
      <input class="form-control" id="family_name" name="family_name" maxlength="100"
             value="{{ entity.family_name if entity and entity.family_name else '' }}">
    </div>
    <div class="mb-2">
      <label class="form-label" for="date_of_birth">Date of birth:</label>
      <input class="form-control" type="date" id="date_of_birth" name="date_of_birth"
             value="{{ entity.date_of_birth_for_html if entity else '' }}">
      <label class="form-label" for="date_of_death">Date of death:</label>
      <input class="form-control" type="date" id="date_of_death" name="date_of_death"
             value="{{ entity.date_of_death_for_html if entity else '' }}">
    </div>
    <button class="btn btn-primary" type="submit">Submit</button>
  </form>
  {{ errors_html }}
{% endblock %}
"""

# --- Genres ---
GENRE_LIST_HTML = """
{% extends base %}
{% block content %}
  <ul>
  {% for genre in genres %}
    <li><a href="{{ genre.url }}">{{ genre.name }}</a></li>
  {% else %}
    <li>There are no genres.</li>
  {% endfor %}
  </ul>
{% endblock %}
"""

GENRE_DETAIL_HTML = """
{% extends base %}
{% block content %}
  <h2>Genre: {{ genre.name }}</h2>
  <h4>Books</h4>
  <dl>
  {% for book in books %}
    <dt><a href="{{ book.url }}">{{ book.title }}</a></dt>
    <dd>{{ book.summary }}</dd>
  {% else %}
    <p>This genre has no books.</p>
  {% endfor %}
  </dl>
  <hr>
  <a href="{{ genre.url }}/delete">Delete genre</a> |
  <a href="{{ genre.url }}/update">Update genre</a>
{% endblock %}
"""

GENRE_FORM_HTML = """
{% extends base %}
{% block content %}
  <form method="post">
    <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
    <div class="mb-2">
      <label class="form-label" for="name">Genre:</label>
      <input class="form-control" id="name" name="name" placeholder="Fantasy, Poetry etc." maxlength="100"
             value="{{ entity.name if entity and entity.name else '' }}">
    </div>
    <button class="btn btn-primary" type="submit">Submit</button>
  </form>
  {{ errors_html }}
{% endblock %}
"""

# --- Books ---
BOOK_LIST_HTML = """
{% extends base %}
{% block content %}
  <ul>
  {% for book in books %}
    <li><a href="{{ book.url }}">{{ book.title }}</a> ({{ book.author.name }})</li>
  {% else %}
    <li>There are no books.</li>
  {% endfor %}
  </ul>
{% endblock %}
"""

BOOK_DETAIL_HTML = """
{% extends base %}
{% block content %}
  <p><strong>Author:</strong> <a href="{{ book.author.url }}">{{ book.author.name }}</a></p>
  <p><strong>Summary:</strong> {{ book.summary }}</p>
  <p><strong>ISBN:</strong> {{ book.isbn }}</p>
  <p><strong>Genre:</strong>
    {% for genre in book.genre %}<a href="{{ genre.url }}">{{ genre.name }}</a>{% if not loop.last %}, {% endif %}{% endfor %}
  </p>
  <h4>Copies</h4>
  {% for copy in instances %}
    <hr>
    <p class="status-{{ copy.status }}">{{ copy.status|capitalize }}</p>
    <p><strong>Imprint:</strong> {{ copy.imprint }}</p>
    {% if copy.status != 'available' %}<p><strong>Due back:</strong> {{ copy.due_back_formatted }}</p>{% endif %}
    <p><strong>Id:</strong> <a href="{{ copy.url }}">{{ copy.id }}</a></p>
  {% else %}
    <p>There are no copies of this book in the library.</p>
  {% endfor %}
  <hr>
  <a href="{{ book.url }}/delete">Delete book</a> |
  <a href="{{ book.url }}/update">Update book</a>
{% endblock %}
"""

BOOK_FORM_HTML = """
{% extends base %}
{% block content %}
  <form method="post">
    <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
    <div class="mb-2">
      <label class="form-label" for="title">Title:</label>
      <input class="form-control" id="title" name="title" value="{{ entity.title if entity and entity.title else '' }}">
    </div>
    <div class="mb-2">
      <label class="form-label" for="author">Author:</label>
      <select class="form-select" id="author" name="author">
        <option value="">--Please select an author--</option>
        {% for author in authors %}
          <option value="{{ author.id }}" {% if entity and entity.author_id == author.id %}selected{% endif %}>{{ author.name }}</option>
        {% endfor %}
      </select>
    </div>
    <div class="mb-2">
      <label class="form-label" for="summary">Summary:</label>
      <textarea class="form-control" id="summary" name="summary">{{ entity.summary if entity and entity.summary else '' }}</textarea>
    </div>
    <div class="mb-2">
      <label class="form-label" for="isbn">ISBN:</label>
      <input class="form-control" id="isbn" name="isbn" value="{{ entity.isbn if entity and entity.isbn else '' }}">
    </div>
    <div class="mb-2">
      <label class="form-label">Genre:</label>
      {% for option in genres %}
        <div class="form-check form-check-inline">
          <input class="form-check-input" type="checkbox" name="genre" id="genre-{{ option.genre.id }}"
                 value="{{ option.genre.id }}" {% if option.checked %}checked{% endif %}>
          <label class="form-check-label" for="genre-{{ option.genre.id }}">{{ option.genre.name }}</label>
        </div>
      {% endfor %}
    </div>
    <button class="btn btn-primary" type="submit">Submit</button>
  </form>
  {{ errors_html }}
{% endblock %}
"""

# --- Book instances ---
BOOKINSTANCE_LIST_HTML = """
{% extends base %}
{% block content %}
  <ul>
  {% for copy in instances %}
    <li>
      <a href="{{ copy.url }}">{{ copy.book.title }} : {{ copy.imprint }}</a> -
      <span class="status-{{ copy.status }}">{{ copy.status|capitalize }}</span>
      {% if copy.status != 'available' %}<span> (Due: {{ copy.due_back_formatted }})</span>{% endif %}
    </li>
  {% else %}
    <li>There are no book copies in this library.</li>
  {% endfor %}
  </ul>
{% endblock %}
"""

BOOKINSTANCE_DETAIL_HTML = """
{% extends base %}
{% block content %}
  <h2>ID: {{ instance.id }}</h2>
  <p><strong>Title:</strong> <a href="{{ instance.book.url }}">{{ instance.book.title }}</a></p>
  <p><strong>Imprint:</strong> {{ instance.imprint }}</p>
  <p><strong>Status:</strong> <span class="status-{{ instance.status }}">{{ instance.status|capitalize }}</span></p>
  {% if instance.status != 'available' %}<p><strong>Due back:</strong> {{ instance.due_back_formatted }}</p>{% endif %}
  <hr>
  <a href="{{ instance.url }}/delete">Delete BookInstance</a> |
  <a href="{{ instance.url }}/update">Update BookInstance</a>
{% endblock %}
"""

BOOKINSTANCE_FORM_HTML = """
{% extends base %}
{% block content %}
  <form method="post">
    <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
    <div class="mb-2">
      <label class="form-label" for="book">Book:</label>
      <select class="form-select" id="book" name="book">
        <option value="">--Please select a book--</option>
        {% for book in books %}
          <option value="{{ book.id }}" {% if entity and entity.book_id == book.id %}selected{% endif %}>{{ book.title }}</option>
        {% endfor %}
      </select>
    </div>
    <div class="mb-2">
      <label class="form-label" for="imprint">Imprint:</label>
      <input class="form-control" id="imprint" name="imprint" value="{{ entity.imprint if entity and entity.imprint else '' }}">
    </div>
    <div class="mb-2">
      <label class="form-label" for="due_back">Date when book available:</label>
      <input class="form-control" type="date" id="due_back" name="due_back" value="{{ entity.due_back_for_html if entity else '' }}">
    </div>
    <div class="mb-2">
      <label class="form-label" for="status">Status:</label>
      <select class="form-select" id="status" name="status">
        {% for value in statuses %}
          <option value="{{ value }}" {% if entity and entity.status == value %}selected{% endif %}>{{ value|capitalize }}</option>
        {% endfor %}
      </select>
    </div>
    <button class="btn btn-primary" type="submit">Submit</button>
  </form>
  {{ errors_html }}
{% endblock %}
"""

DELETE_HTML = """
{% extends base %}
{% block content %}
  <h2>{{ entity_label }}</h2>
  {% if dependents %}
    <p><strong>Delete the following {{ dependent_label }} before attempting to delete this {{ entity_kind }}.</strong></p>
    <ul>
    {% for item in dependents %}
      <li><a href="{{ item.url }}">{{ item.title if item.title is defined else item.imprint }}</a></li>
    {% endfor %}
    </ul>
  {% else %}
    <p>Do you really want to delete this {{ entity_kind }}?</p>
    <form method="post">
      <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
      <button class="btn btn-danger" type="submit">Delete</button>
    </form>
  {% endif %}
{% endblock %}
"""


def render_template_base(template_str, **context):
    """Render ``template_str`` inside the shared page layout."""
    env = current_app.jinja_env
    ctx = dict(base=env.from_string(BASE_HTML))
    ctx.update(context)
    ctx['errors_html'] = Markup(env.from_string(ERRORS_HTML).render(errors=ctx.get('errors')))
    return render_template_string(template_str, **ctx)
