"""
Virtuoso songs server

Flask application exposing the song store over JSON.

Usage:
    python -m virtuoso.webui.app

    Or through the CLI:
    virtuoso serve --port 3000
"""

import logging

from flask import Flask

from virtuoso.songs.store import MidiSongStore, SongStore
from virtuoso.webui.config import get_config
from virtuoso.webui.api import songs_bp


def create_app(config_name=None, store: SongStore = None):
    """
    Create and configure Flask application.

    Args:
        config_name: Configuration name ('development', 'production', 'testing').
                     If None, uses FLASK_ENV environment variable.
        store: Song store to serve. Defaults to a MidiSongStore in SONGS_DIR.

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    config = get_config(config_name)
    app.config.from_object(config)
    app.config['SONG_STORE'] = store if store is not None else MidiSongStore(config.SONGS_DIR)

    logging.getLogger('virtuoso').setLevel(getattr(logging, config.LOG_LEVEL))

    app.register_blueprint(songs_bp)
    return app


if __name__ == '__main__':
    from virtuoso.utils.logs import init_logging

    init_logging()
    app = create_app()
    app.run(host='127.0.0.1', port=app.config['PORT'])
