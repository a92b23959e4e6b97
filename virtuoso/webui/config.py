"""
Flask application configuration for the songs server.

Values come from the environment where a deployment needs to change them.
"""

import os
from pathlib import Path


class Config:
    """Base configuration"""

    APP_NAME = 'Virtuoso Piano'

    # Song storage: manifest.json plus one .mid per song
    SONGS_DIR = Path(os.environ.get('SONGS_DIR', 'songs'))
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    PORT = int(os.environ.get('PORT', '3000'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    LOG_LEVEL = 'DEBUG'


config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
}


def get_config(config_name=None):
    """
    Get configuration class by name.

    Args:
        config_name: 'development', 'production' or 'testing'.
                     If None, uses the FLASK_ENV environment variable.

    Returns:
        Configuration class
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')
    return config_by_name.get(config_name, DevelopmentConfig)
