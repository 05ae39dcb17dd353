import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    # In-memory by default; set DATABASE_URL to keep the query log on disk
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite://')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    SEARCH_FAILURE_RATE = float(os.getenv('SEARCH_FAILURE_RATE', 0.1))
    SEARCH_NO_HEARING_RATE = float(os.getenv('SEARCH_NO_HEARING_RATE', 0.3))
    SEARCH_MIN_DELAY = float(os.getenv('SEARCH_MIN_DELAY', 2.0))
    SEARCH_MAX_DELAY = float(os.getenv('SEARCH_MAX_DELAY', 5.0))
    SEARCH_HISTORY_SIZE = int(os.getenv('SEARCH_HISTORY_SIZE', 5))
    SEARCH_WORKERS = int(os.getenv('SEARCH_WORKERS', 4))
    SEARCH_MAX_SESSIONS = int(os.getenv('SEARCH_MAX_SESSIONS', 1000))
    PDF_BASE_URL = os.getenv('PDF_BASE_URL', 'https://example.com/orders')
    QUERY_LOG_LIMIT = 50


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    LOG_LEVEL = 'WARNING'
    SEARCH_FAILURE_RATE = 0.0
    SEARCH_MIN_DELAY = 0.0
    SEARCH_MAX_DELAY = 0.0
    SEARCH_MAX_SESSIONS = 20


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig,
}
