import os
import datetime
from dotenv import load_dotenv

load_dotenv()


def database_uri():
    if os.environ.get('DATABASE_URL'):
        return os.environ['DATABASE_URL']
    if os.environ.get('DB_HOST'):
        db_user = os.environ.get('DB_USER', 'payportal_user')
        db_pass = os.environ.get('DB_PASS', 'password')
        db_name = os.environ.get('DB_NAME', 'payportal_db')
        return f"postgresql://{db_user}:{db_pass}@{os.environ['DB_HOST']}/{db_name}"
    return 'sqlite:///payportal.db'


def load_config():
    return {
        'SQLALCHEMY_DATABASE_URI': database_uri(),
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'JWT_SECRET_KEY': os.environ.get('JWT_SECRET', 'dev-secret-change-me'),
        'JWT_ACCESS_TOKEN_EXPIRES': datetime.timedelta(
            minutes=int(os.environ.get('JWT_EXPIRES_MINUTES', '60'))
        ),
        'LOG_LEVEL': os.environ.get('LOG_LEVEL', 'INFO'),
    }
