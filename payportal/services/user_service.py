"""
User Service — account creation and lookup
"""

import logging
from sqlalchemy import or_
from payportal.extensions import db
from payportal.models.user import User

logger = logging.getLogger(__name__)


def normalize_email(email):
    return (email or '').strip().lower()


def get_user_by_email(email):
    return User.query.filter_by(email=normalize_email(email)).first()


def account_exists(email, id_number):
    return User.query.filter(
        or_(User.email == normalize_email(email), User.id_number == str(id_number).strip())
    ).first() is not None


def create_user(name, surname, id_number, email, password, role='user'):
    """
    Adds and commits a new account. Callers validate the payload and check
    account_exists() first; integrity errors still roll back and re-raise.
    """
    user = User(
        name=str(name).strip(),
        surname=str(surname).strip(),
        id_number=str(id_number).strip(),
        email=normalize_email(email),
        role=role,
    )
    user.set_password(str(password))
    try:
        db.session.add(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("Created %s account %s", role, user.email)
    return user
