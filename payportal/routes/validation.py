import re

EMAIL_REGEX = r'^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$'
ID_NUMBER_REGEX = r'^\d{13}$'
MIN_PASSWORD_LENGTH = 8

ACCOUNT_FIELDS = ['name', 'surname', 'idNumber', 'email', 'password']


def missing_fields(data, required):
    return [f for f in required if not str(data.get(f) or '').strip()]


def validate_account(data):
    """Returns an error message for registration-style payloads, or None."""
    missing = missing_fields(data, ACCOUNT_FIELDS)
    if missing:
        return f"Missing fields: {', '.join(missing)}"
    if not re.match(EMAIL_REGEX, str(data['email']).strip()):
        return 'Invalid email format'
    if not re.match(ID_NUMBER_REGEX, str(data['idNumber']).strip()):
        return 'ID number must be exactly 13 digits'
    if len(str(data['password'])) < MIN_PASSWORD_LENGTH:
        return f'Password must be at least {MIN_PASSWORD_LENGTH} characters'
    return None
