# virtuoso/webui/__init__.py
