# virtuoso/errors.py

class VirtuosoError(Exception):
    """Base class for errors raised by the piano core."""


class SongError(VirtuosoError):
    """A song payload is missing fields or has nothing to save."""


class StoreError(VirtuosoError):
    """Reading or writing the song store failed."""
