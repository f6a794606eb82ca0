"""
Flask Application Factory for the pattern & strategy engine API.
"""

from flask import Flask

from config import SECRET_KEY
from roulette_engine.history import EventHistory


def create_app(history=None):
    app = Flask(__name__)

    app.config['SECRET_KEY'] = SECRET_KEY
    app.extensions['event_history'] = history if history is not None else EventHistory()

    from roulette_engine.routes import main_bp
    app.register_blueprint(main_bp)

    @app.after_request
    def add_no_cache_headers(response):
        """Engine output changes on every spin; never let clients cache it."""
        if response.content_type and 'application/json' in response.content_type:
            response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
        return response

    return app
