"""
Pytest configuration and shared fixtures for the test suite.
"""
import pytest
from datetime import datetime, timedelta
from app import create_app, db
from extensions import mail
from models import User, Daycare, DaycareFeature
from services.token_service import TokenService


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app('testing')
    app.config.update({
        'SECRET_KEY': 'test-secret-key',
        'JWT_ACCESS_SECRET': 'test-access-secret',
        'JWT_REFRESH_SECRET': 'test-refresh-secret',
        'MAIL_SUPPRESS_SEND': True,
        'FRONTEND_URL': 'http://frontend.test',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()

@pytest.fixture(scope='function')
def runner(app):
    """Create test CLI runner."""
    return app.test_cli_runner()

@pytest.fixture
def db_session(app):
    """Create database session."""
    with app.app_context():
        yield db.session

@pytest.fixture
def token_service(app):
    return TokenService.from_config(app.config)

@pytest.fixture
def outbox(app):
    """Messages handed to Flask-Mail during the test."""
    with mail.record_messages() as outbox:
        yield outbox


def create_test_user(email='parent@example.com', password='password123', verified=True, **fields):
    user = User(
        email=email,
        first_name=fields.pop('first_name', 'Test'),
        last_name=fields.pop('last_name', 'Parent'),
        user_type=fields.pop('user_type', 'parent'),
        address=fields.pop('address', '123 Main St'),
        children=fields.pop('children', [{'name': 'Sam', 'age': 3, 'specialNeeds': ''}]),
        email_verified=verified,
        acknowledgement=True,
        **fields
    )
    user.set_password(password)
    user.update_profile_complete()
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def test_user(db_session):
    """Create a verified parent account."""
    return create_test_user()

@pytest.fixture
def unverified_user(db_session):
    """Create an account that still holds a live verification token."""
    user = create_test_user(email='pending@example.com', verified=False)
    user.set_verification_token('a' * 64, datetime.utcnow() + timedelta(hours=24))
    db_session.commit()
    return user

@pytest.fixture
def provider_user(db_session):
    return create_test_user(email='provider@example.com', user_type='provider',
                            last_name='Provider', daycare_id='42', children=[])


@pytest.fixture
def logged_in_client(client, test_user):
    """Client holding the session cookies of ``test_user``."""
    response = client.post('/api/auth/login', json={
        'email': test_user.email,
        'password': 'password123',
    })
    assert response.status_code == 200
    return client


@pytest.fixture
def make_daycare(db_session):
    """Factory for daycare listings. ``capacity`` maps age-group keys to seats."""
    def _make(name='Test Daycare', capacity=None, features=(), **fields):
        daycare = Daycare(
            name=name,
            description=fields.pop('description', ''),
            address=fields.pop('address', '1 Test St'),
            city=fields.pop('city', 'Toronto'),
            region=fields.pop('region', 'Toronto'),
            ward=fields.pop('ward', ''),
            **fields
        )
        for group, seats in (capacity or {}).items():
            daycare.set_capacity(group, seats)
        for feature in features:
            daycare.features.append(DaycareFeature(name=feature))
        db_session.add(daycare)
        db_session.commit()
        return daycare
    return _make


@pytest.fixture
def sample_registration_data():
    """Valid registration payload for a parent account."""
    return {
        'email': 'newparent@example.com',
        'password': 'securepassword123',
        'firstName': 'Jamie',
        'lastName': 'Rivera',
        'userType': 'parent',
        'phone': '4165550123',
        'address': 'M5V 2T6',
        'children': [{'name': 'Alex', 'age': 2, 'specialNeeds': ''}],
        'communicationPreferences': {
            'email': True,
            'sms': False,
            'promotional': False,
            'acknowledgement': True,
        },
    }
