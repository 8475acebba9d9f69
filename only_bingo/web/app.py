from __future__ import annotations

import json
import secrets

import click
from flask import Flask, Response, flash, jsonify, redirect, render_template_string, request, session

from only_bingo.config import AppConfig, configure_logging, load_config
from only_bingo.core.boards import BoardService
from only_bingo.core.errors import InternalError, NotFoundError, ValidationError
from only_bingo.core.checker import new_click_state
from only_bingo.core.generator import MIN_WORDS, Board
from only_bingo.core.session import BoardSession
from only_bingo.core.share import build_share_url
from only_bingo.core.store import BoardStore


HTML = """
<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Only Bingo!</title>
    <style>
      body { font-family: system-ui, -apple-system, Segoe UI, Roboto, sans-serif; margin: 24px; max-width: 920px; }
      h1 { margin: 0 0 8px; }
      .hint { color: #333; margin: 0 0 16px; }
      textarea { width: 100%; min-height: 260px; padding: 10px; border: 1px solid #111; border-radius: 6px; }
      .btn { margin-top: 14px; padding: 10px 14px; border: 2px solid #111; border-radius: 10px; background: #fff; font-weight: 700; cursor: pointer; }
      .box { border: 2px solid #111; border-radius: 12px; padding: 14px; margin-bottom: 16px; }
      .flash { margin: 10px 0; padding: 10px 12px; border: 1px solid #111; border-radius: 8px; }
      .small { font-size: 12px; color: #333; }
      .mono { font-family: ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, monospace; }
      table.board { border-collapse: collapse; }
      table.board td { width: 120px; height: 90px; border: 1px solid #111; text-align: center; padding: 4px; }
      table.board td.marked { background: #111; color: #fff; font-weight: 700; }
      table.board button.cell { width: 100%; height: 100%; border: 0; background: transparent; color: inherit; font: inherit; cursor: pointer; }
      .celebrate { font-size: 28px; font-weight: 700; }
    </style>
  </head>
  <body>
    <h1>Only Bingo!</h1>
    <p class="hint">Enter at least {{ min_words }} words or phrases, one per line, then create your board.</p>

    {% with messages = get_flashed_messages() %}
      {% if messages %}
        {% for msg in messages %}
          <div class="flash">{{ msg }}</div>
        {% endfor %}
      {% endif %}
    {% endwith %}

    {% if duplicates %}
      <div class="flash">Duplicate words: {{ duplicates | join(", ") }}</div>
    {% endif %}

    {% if bingo %}
      <div class="flash {{ 'celebrate' if celebrating else '' }}">BINGO!</div>
    {% endif %}

    {% if board %}
      <div class="box">
        <table class="board">
          {% for row in board %}
            {% set r = loop.index0 %}
            <tr>
              {% for cell in row %}
                {% set label = cell if cell is not none else "FREE" %}
                <td class="{{ 'marked' if clicked[r][loop.index0] else '' }}">
                  {% if interactive %}
                    <form method="post" action="/toggle">
                      <input type="hidden" name="row" value="{{ r }}">
                      <input type="hidden" name="col" value="{{ loop.index0 }}">
                      <button class="cell" type="submit">{{ label }}</button>
                    </form>
                  {% else %}
                    {{ label }}
                  {% endif %}
                </td>
              {% endfor %}
            </tr>
          {% endfor %}
        </table>

        {% if share_url %}
          <p>Share this board: <span class="mono">{{ share_url }}</span></p>
        {% else %}
          <form method="post" action="/share">
            <input type="hidden" name="words" value="{{ words_input }}">
            <input type="hidden" name="board" value="{{ board_json }}">
            <button class="btn" type="submit">Share board</button>
          </form>
        {% endif %}
      </div>
    {% endif %}

    <form class="box" method="post" action="/board">
      <textarea name="words" placeholder="One word or phrase per line">{{ words_input }}</textarea>
      <div class="small">{{ word_count }} word(s)</div>
      <button class="btn" type="submit">Create board</button>
    </form>
  </body>
</html>
"""


MAX_BOARD_SESSIONS = 1000
SESSION_KEY = "board_session"


class BoardSessions:
    """In-process board sessions, one per browser, keyed by a token in the signed cookie."""

    def __init__(self, limit: int = MAX_BOARD_SESSIONS) -> None:
        self._limit = limit
        self._sessions: dict[str, BoardSession] = {}

    def current(self) -> BoardSession | None:
        token = session.get(SESSION_KEY)
        return self._sessions.get(token) if token else None

    def keep(self, board_session: BoardSession) -> None:
        token = session.get(SESSION_KEY)
        if not token:
            token = secrets.token_urlsafe(16)
            session[SESSION_KEY] = token
        self._sessions.pop(token, None)
        self._sessions[token] = board_session
        while len(self._sessions) > self._limit:
            self._sessions.pop(next(iter(self._sessions)))

    def __len__(self) -> int:
        return len(self._sessions)


def _render(
    board_session: BoardSession | None = None,
    *,
    words_input: str = "",
    board: Board | None = None,
    share_url: str | None = None,
) -> str:
    if board_session is None:
        board_session = BoardSession()
        board_session.set_words_input(words_input)
    interactive = board is None and board_session.has_board
    if board is not None:
        clicked = new_click_state()
    elif board_session.has_board:
        board, clicked = board_session.board, board_session.clicked
    else:
        clicked = []
    return render_template_string(
        HTML,
        min_words=MIN_WORDS,
        board=board,
        clicked=clicked,
        interactive=interactive,
        bingo=interactive and board_session.bingo,
        celebrating=interactive and board_session.is_exploding,
        board_json=json.dumps(board) if board else "",
        words_input=board_session.words_input,
        word_count=len(board_session.words),
        duplicates=board_session.duplicate_words,
        share_url=share_url,
    )


def _error_body(message: str, exc: ValidationError | None = None) -> dict:
    body: dict = {"error": message}
    if exc is not None:
        body["issues"] = exc.issues
    return body


def create_app(config: AppConfig | None = None, *, store: BoardStore | None = None) -> Flask:
    config = config or load_config()
    if store is None:
        store = BoardStore.from_url(config.require_database_url())
    store.init_schema()
    service = BoardService(store)
    sessions = BoardSessions()

    app = Flask(__name__)
    app.secret_key = config.secret_key
    app.config["ONLY_BINGO"] = config

    @app.get("/")
    def index() -> str:
        board_id = request.args.get("id")
        if not board_id:
            return _render(sessions.current())

        try:
            data = service.get(board_id)
        except ValidationError:
            flash("That board link is not valid.")
            return _render()
        except NotFoundError:
            flash("Board not found. Shared boards expire after 48 hours.")
            return _render()
        except InternalError:
            flash("Unable to load the board right now. Please try again.")
            return _render()

        board_session = BoardSession()
        board_session.load_board(data["words"], data["board"])
        sessions.keep(board_session)
        return _render(board_session)

    @app.post("/board")
    def create_board_page() -> str:
        board_session = BoardSession()
        board_session.set_words_input(request.form.get("words") or "")
        try:
            board_session.create_board()
        except ValidationError:
            flash(f"Need at least {MIN_WORDS} words (you have {len(board_session.words)}).")
            return _render(board_session)

        sessions.keep(board_session)
        return _render(board_session)

    @app.post("/toggle")
    def toggle_cell_page() -> Response | str:
        board_session = sessions.current()
        if board_session is None or not board_session.has_board:
            flash("Create a board first.")
            return redirect("/")

        row = request.form.get("row", type=int)
        col = request.form.get("col", type=int)
        if row is not None and col is not None:
            board_session.toggle_cell(row, col)
        return _render(board_session)

    @app.post("/share")
    def share_page() -> Response | str:
        words_input = request.form.get("words") or ""
        board_session = BoardSession()
        board_session.set_words_input(words_input)
        try:
            board = json.loads(request.form.get("board") or "null")
            created = service.create({"words": board_session.words, "board": board})
        except json.JSONDecodeError:
            flash("Create a board before sharing it.")
            return redirect("/")
        except ValidationError:
            flash("This board cannot be shared. Check the word list and try again.")
            return _render(words_input=words_input)
        except InternalError:
            flash("Failed to create a share link. Please try again.")
            return _render(words_input=words_input)

        share_url = build_share_url(config.site_url, created["id"])
        return _render(board_session, board=board, share_url=share_url)

    @app.post("/api/boards")
    def api_create_board():
        try:
            return jsonify(service.create(request.get_json(silent=True)))
        except ValidationError as exc:
            return jsonify(_error_body("Invalid board data", exc)), 400
        except InternalError:
            return jsonify(_error_body("Failed to create board")), 500

    @app.get("/api/boards/<board_id>")
    def api_get_board(board_id: str):
        try:
            return jsonify(service.get(board_id))
        except ValidationError as exc:
            return jsonify(_error_body("Invalid board ID", exc)), 400
        except NotFoundError:
            return jsonify(_error_body("Board not found")), 404
        except InternalError:
            return jsonify(_error_body("Failed to fetch board")), 500

    @app.cli.command("init-db")
    def init_db_command() -> None:
        """Create the boards table if it does not exist."""
        store.init_schema()
        click.echo("Initialized the boards table.")

    return app


if __name__ == "__main__":
    cfg = load_config()
    configure_logging(cfg.debug)
    create_app(cfg).run(host="127.0.0.1", port=5000, debug=cfg.debug)
