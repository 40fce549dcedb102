# single page: tile grid of installed games
INDEX_HTML =  r"""<!doctype html>
<html lang="en" data-bs-theme="dark">
<head>
  <meta charset="utf-8">
  <title>{{ app_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css" rel="stylesheet">
  <style>
    .card { border: 1px solid rgba(255,255,255,.08); }
    .tile { width: {{ tile }}px; }
    .game-cover { width: {{ tile }}px; height: {{ tile }}px; object-fit: cover; border-radius: .5rem .5rem 0 0; background:#222; }
    .title { white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }
    .unresolved .game-cover { filter: grayscale(1) brightness(.7); }
  </style>
</head>
<body>
<nav class="navbar navbar-expand-lg bg-body-tertiary px-3">
  <a class="navbar-brand" href="{{ url_for('twitchshelf.index') }}">{{ app_title }}</a>
  <div class="ms-auto d-flex gap-2">
    {% if kids_only %}
      <a class="btn btn-outline-light btn-sm" href="{{ url_for('twitchshelf.index') }}">All games</a>
    {% else %}
      <a class="btn btn-outline-light btn-sm" href="{{ url_for('twitchshelf.index', kids=1) }}">Kids</a>
    {% endif %}
  </div>
</nav>

<div class="container py-4">
  {% with messages = get_flashed_messages() %}
    {% if messages %}
      <div class="alert alert-warning">{{ messages|join('. ') }}</div>
    {% endif %}
  {% endwith %}

  {% if not games %}
    <div class="text-center py-5">
      <h4>No installed games found.</h4>
      <p class="text-secondary">Install games with the Twitch client, then run with <code>--refresh</code>.</p>
    </div>
  {% else %}
  <div class="d-flex flex-wrap gap-3">
    {% for g in games %}
      {% set can_launch = g.command or g.launch_url %}
      <div class="card tile shadow-sm {% if not can_launch %}unresolved{% endif %}">
        <img class="game-cover" src="{{ url_for('twitchshelf.cover', asin=g.asin) }}" alt="cover">
        <div class="card-body p-2 d-flex flex-column">
          <div class="title fw-semibold small" title="{{ g.title }}">{{ g.title }}</div>
          <div class="mt-2">
            {% if can_launch %}
              <form action="{{ url_for('twitchshelf.launch', asin=g.asin, kids=1 if kids_only else None) }}" method="post">
                <button class="btn btn-success btn-sm w-100" type="submit">Play</button>
              </form>
            {% else %}
              <span class="badge text-bg-secondary">No launch info</span>
            {% endif %}
          </div>
        </div>
      </div>
    {% endfor %}
  </div>
  {% endif %}
</div>
</body>
</html>
"""
