import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the package directory or the backend directory
env_path = Path(__file__).parent / '.env'
if not env_path.exists():
    env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)


def _split_origins(value):
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY

    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017/billsplit')
    # Used when MONGO_URI carries no database name
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'billsplit')

    CORS_ORIGINS = _split_origins(
        os.getenv('CORS_ORIGINS', 'http://localhost:5173,http://localhost:8080')
    )


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length'
    MONGO_URI = 'mongodb://localhost:27017/billsplit_test'
