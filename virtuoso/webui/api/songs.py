"""
Songs API Endpoints

GET lists every stored song with its events; POST saves one.
The song store itself is injected through app.config['SONG_STORE'].
"""

import logging

from flask import current_app, jsonify, request

from virtuoso.errors import SongError
from virtuoso.notes.model import Song
from virtuoso.webui.api import songs_bp

log = logging.getLogger(__name__)


def _store():
    return current_app.config['SONG_STORE']


@songs_bp.route('', methods=['GET'])
def list_songs():
    """
    GET /api/songs

    Returns:
        200: JSON array of songs
             [{"name", "composer", "description", "data": [event, ...]}, ...]
        500: {"error": ...}
    """
    try:
        songs = _store().list()
        return jsonify([s.to_dict() for s in songs]), 200
    except Exception:
        log.exception("Error loading songs")
        return jsonify({'error': 'Failed to load songs'}), 500


@songs_bp.route('', methods=['POST'])
def save_song():
    """
    POST /api/songs

    Body:
        {"name": str, "composer"?: str, "description"?: str, "data": [event, ...]}

    Returns:
        200: {"success": true, "fileName": str, "song": {...}}
        400: name or data missing, malformed events, nothing to save
        500: storage failure
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not payload.get('name') or payload.get('data') is None:
        return jsonify({'error': 'Name and data are required'}), 400

    try:
        song = Song.from_dict(payload)
        if not song.data:
            raise SongError('No events to save')
        file_name = _store().save(song)
    except SongError as e:
        return jsonify({'error': str(e)}), 400
    except Exception:
        log.exception("Error saving song")
        return jsonify({'error': 'Failed to save song'}), 500

    song.composer = song.composer or 'Unknown'
    song.description = song.description or ''
    return jsonify({'success': True, 'fileName': file_name, 'song': song.to_dict()}), 200
