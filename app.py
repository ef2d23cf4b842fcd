"""
QuizPage - Quiz widget server
A Flask app that serves the quiz page and question file, and runs quiz
sessions (paging, navigation, scoring) behind a small JSON API.
"""

import os
import sys
import random
from pathlib import Path

from flask import Flask, jsonify, request, send_file, send_from_directory, abort
from loguru import logger
from werkzeug.exceptions import NotFound

import commands
from quiz_session import QuizError
from repository import QuestionRepository, is_url
from settings import settings as default_settings


def configure_logging(level="INFO"):
    logger.remove()
    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {message}",
        level=level,
    )


def create_app(settings=None, repository=None, rng=None):
    """Build the app. The repository is loaded from settings unless one is given."""
    settings = settings or default_settings
    static_dir = Path(settings.STATIC_DIR)

    app = Flask(__name__, static_folder=None)

    if repository is None:
        repository = QuestionRepository()
        repository.load(settings.QUESTIONS_SOURCE)
    app.extensions["quiz_repository"] = repository

    # Store the active quiz session (simple in-memory for single user)
    current_quiz = {"state": None}

    def active_state():
        if current_quiz["state"] is None:
            raise QuizError("No active quiz. Start a quiz first.")
        return current_quiz["state"]

    def respond(state, render):
        current_quiz["state"] = state
        return jsonify({"success": True, **render})

    @app.errorhandler(QuizError)
    def handle_quiz_error(e):
        logger.warning(f"[quiz] {e}")
        return jsonify({"success": False, "error": str(e)}), 409

    @app.after_request
    def disable_caching(response):
        """Question data and API responses must never be cached."""
        if request.path.endswith(".json"):
            response.headers["Cache-Control"] = "no-store"
        elif request.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response

    # ========================================
    # Static Delivery
    # ========================================

    @app.route('/')
    def index():
        """Serve the quiz page."""
        return send_from_directory(static_dir, "index.html")

    @app.route('/questions.json')
    def questions_file():
        """Serve the question file being used as the question source."""
        source = settings.QUESTIONS_SOURCE
        if not is_url(source) and Path(source).is_file():
            return send_file(Path(source).resolve(), mimetype="application/json")
        return send_from_directory(static_dir, "questions.json")

    @app.route('/<path:filename>')
    def static_files(filename):
        """Serve a static asset; "/name" falls back to "name.html"."""
        try:
            return send_from_directory(static_dir, filename)
        except NotFound:
            if filename.endswith(".html"):
                raise
            return send_from_directory(static_dir, f"{filename}.html")

    # ========================================
    # Quiz API Routes
    # ========================================

    def payload():
        return request.get_json(silent=True) or {}

    @app.route('/api/quiz/load', methods=['POST'])
    def quiz_load():
        """Re-read the question source, replacing the current questions."""
        count = repository.load(settings.QUESTIONS_SOURCE)
        return jsonify({"success": True, "total": count})

    @app.route('/api/quiz/start', methods=['POST'])
    def quiz_start():
        """Start (or restart) a session: {"count": N | "all", "sequential": bool}."""
        data = payload()
        state, render = commands.start(
            repository.questions,
            data.get("count", "10"),
            bool(data.get("sequential", False)),
            page_size=settings.PAGE_SIZE,
            rng=rng,
        )
        logger.info(
            f"[quiz] Session started: {state.total_size} questions, "
            f"sequential={state.sequential}, all={state.all_mode}"
        )
        return respond(state, render)

    @app.route('/api/quiz/submit', methods=['POST'])
    def quiz_submit():
        """Score the answers for the current page."""
        state, render = commands.submit(active_state(), payload().get("answers"))
        return respond(state, render)

    @app.route('/api/quiz/page/<direction>', methods=['POST'])
    def quiz_page(direction):
        handlers = {"next": commands.next_page, "prev": commands.prev_page}
        if direction not in handlers:
            abort(404)
        return respond(*handlers[direction](active_state(), rng))

    @app.route('/api/quiz/question/<direction>', methods=['POST'])
    def quiz_question(direction):
        handlers = {"next": commands.next_question, "prev": commands.prev_question}
        if direction not in handlers:
            abort(404)
        return respond(*handlers[direction](active_state(), rng))

    @app.route('/api/quiz/goto', methods=['POST'])
    def quiz_goto():
        """Jump to question number N (1-based, clamped)."""
        return respond(*commands.jump(active_state(), payload().get("number"), rng))

    return app


if __name__ == '__main__':
    configure_logging(default_settings.LOG_LEVEL)

    logger.info("QuizPage starting...")
    logger.info(f"Process ID: {os.getpid()}")
    logger.info(f"Question source: {default_settings.QUESTIONS_SOURCE}")

    app = create_app(rng=random.Random())

    from waitress import serve
    logger.info(f"Server running on port {default_settings.PORT}")
    serve(app, host=default_settings.HOST, port=default_settings.PORT,
          threads=default_settings.THREADS)
