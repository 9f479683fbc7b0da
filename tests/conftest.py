import os

# Must be set before roomchat is imported: the engine is built at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("AUTH_SECRET", "test-secret")

import pytest
from jose import jwt
from sqlmodel import SQLModel, Session

from roomchat.db.config import engine
from roomchat.models import User, Room, Participant
from roomchat.realtime.room_channel import RoomChannel
from roomchat.settings import AUTH_SECRET, AUTH_ALGORITHM


@pytest.fixture
def session():
    """Fresh tables in the shared in-memory database for each test."""
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def channel():
    return RoomChannel()


@pytest.fixture
def users(session):
    u1 = User(id="u1", name="Ani")
    u2 = User(id="u2", name="Budi")
    session.add_all([u1, u2])
    session.commit()
    return u1, u2


@pytest.fixture
def private_room(session, users):
    """Private room where only u1 is a participant."""
    room = Room(name="rahasia", is_private=True)
    session.add(room)
    session.commit()
    session.refresh(room)
    session.add(Participant(user_id="u1", room_id=room.id))
    session.commit()
    return room


@pytest.fixture
def public_room(session, users):
    room = Room(name="lobby", is_private=False)
    session.add(room)
    session.commit()
    session.refresh(room)
    return room


@pytest.fixture
def make_token():
    def _make(user_id):
        return jwt.encode({"sub": user_id}, AUTH_SECRET, algorithm=AUTH_ALGORITHM)
    return _make


@pytest.fixture
def auth_headers(make_token):
    def _headers(user_id):
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return _headers
