import pytest
from types import SimpleNamespace
from werkzeug.security import generate_password_hash
from roombook import create_app, db
from roombook.models import User, Room
from roombook.config import TestingConfig
from roombook.schemas import BookingCreate
from roombook.services.booking_service import BookingService
from roombook.api.routes.auth import issue_token

DAY = '2025-06-10'

@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    return app.test_client()

def _user(username, **flags):
    return User(
        username=username,
        email=f'{username}@test.com',
        password_hash=generate_password_hash('secret1'),
        full_name=username.title(),
        position='Tester',
        **flags
    )

@pytest.fixture
def init_data(app):
    user = _user('ana')
    other = _user('bruno')
    admin = _user('admin', is_admin=True)
    worker = _user('cozinha', is_kitchen=True)
    db.session.add_all([user, other, admin, worker])
    db.session.flush()

    staffed = Room(name='Sala A', location='1st floor', capacity=8, assigned_kitchen_user_id=worker.id)
    unstaffed = Room(name='Sala B', location='2nd floor', capacity=4)
    db.session.add_all([staffed, unstaffed])
    db.session.commit()

    return SimpleNamespace(user=user, other=other, admin=admin, worker=worker,
                           staffed=staffed, unstaffed=unstaffed)

@pytest.fixture
def book():
    """Create a booking through the service layer."""
    def _book(user, room, start, end, date=DAY, title='Meeting', **extra):
        data = BookingCreate(title=title, roomId=room.id, date=date, startTime=start, endTime=end, **extra)
        return BookingService.create_booking(user, data)
    return _book

@pytest.fixture
def auth():
    def _headers(user):
        return {'Authorization': f'Bearer {issue_token(user)}'}
    return _headers
