"""Input validation helpers for account payloads.

Each validator returns a list of human-readable messages; an empty list means
the payload is acceptable.
"""
import re

from models.user import USER_TYPES

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
MIN_PASSWORD_LENGTH = 6
MIN_CHILD_AGE = 1
MAX_CHILD_AGE = 18


def normalize_email(email):
    if not isinstance(email, str):
        return None
    return email.strip().lower() or None


def is_valid_email(email):
    """Simple email validation"""
    return isinstance(email, str) and EMAIL_PATTERN.match(email) is not None


def coerce_age(value):
    """Return ``value`` as an int, or None when it is not a whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def normalize_children(children):
    """Shape a children payload into ``[{name, age, specialNeeds}]``."""
    if not isinstance(children, list):
        return []
    normalized = []
    for child in children:
        if not isinstance(child, dict):
            continue
        normalized.append({
            'name': str(child.get('name') or '').strip(),
            'age': coerce_age(child.get('age')),
            'specialNeeds': str(child.get('specialNeeds') or ''),
        })
    return normalized


def validate_password(password):
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        return [f'Password must be at least {MIN_PASSWORD_LENGTH} characters long']
    return []


def validate_profile_fields(data):
    """Validate the optional profile fields shared by registration and updates."""
    errors = []

    first_name = data.get('firstName')
    if first_name is not None and len(str(first_name).strip()) < 2:
        errors.append('First name must be at least 2 characters long')

    phone = data.get('phone')
    if phone and len(str(phone).strip()) < 10:
        errors.append('Phone number must be at least 10 characters long')

    if 'children' in data:
        children = data.get('children')
        if not isinstance(children, list):
            errors.append('Children must be an array')
        else:
            for child in children:
                age = coerce_age(child.get('age')) if isinstance(child, dict) else None
                if age is None or not MIN_CHILD_AGE <= age <= MAX_CHILD_AGE:
                    errors.append(f'Child age must be between {MIN_CHILD_AGE} and {MAX_CHILD_AGE}')
                    break

    return errors


def validate_registration(data):
    errors = []

    if not is_valid_email(normalize_email(data.get('email'))):
        errors.append('Valid email is required')

    errors.extend(validate_password(data.get('password')))
    errors.extend(validate_profile_fields(data))

    address = data.get('address')
    if not address or len(str(address).strip()) < 3:
        errors.append('Postal address or code is required (at least 3 characters)')

    user_type = data.get('userType') or 'parent'
    if user_type not in USER_TYPES:
        errors.append(f'User type must be one of: {", ".join(USER_TYPES)}')

    if user_type == 'parent':
        children = normalize_children(data.get('children'))
        if not children:
            errors.append('At least one child is required for parent accounts')
        elif not any(c['age'] is not None and MIN_CHILD_AGE <= c['age'] <= MAX_CHILD_AGE for c in children):
            errors.append(f'At least one child must have a valid age ({MIN_CHILD_AGE}-{MAX_CHILD_AGE})')
    elif user_type == 'provider':
        if not str(data.get('daycareId') or '').strip():
            errors.append('Daycare ID is required for provider accounts')

    preferences = data.get('communicationPreferences')
    if not isinstance(preferences, dict):
        errors.append('Communication preferences are required')
    else:
        if preferences.get('email') is not True:
            errors.append('Email consent is required')
        if preferences.get('acknowledgement') is not True:
            errors.append('Acknowledgement is required to proceed with registration')

    return errors
