import pytest

from roomchat.realtime.room_channel import QueueListener
from roomchat.services.errors import Conflict, Forbidden, InvalidInput, NotFound
from roomchat.services.room_service import RoomService


def test_private_room_creator_becomes_participant(session, users):
    service = RoomService(session)

    room = service.create_room("tim", is_private=True, creator_id="u1")

    assert room.is_private
    assert [p.user_id for p in service.list_participants(room.id)] == ["u1"]


def test_duplicate_participant_is_a_conflict(session, private_room):
    service = RoomService(session)

    service.add_participant(private_room.id, "u2")
    with pytest.raises(Conflict):
        service.add_participant(private_room.id, "u2")

    assert sorted(p.user_id for p in service.list_participants(private_room.id)) == ["u1", "u2"]


def test_participants_only_for_private_rooms(session, public_room):
    with pytest.raises(InvalidInput):
        RoomService(session).add_participant(public_room.id, "u1")


def test_add_participant_unknown_user_or_room(session, private_room):
    service = RoomService(session)

    with pytest.raises(NotFound):
        service.add_participant(private_room.id, "ghost")
    with pytest.raises(NotFound):
        service.add_participant(9999, "u1")


def test_remove_participant(session, private_room):
    service = RoomService(session)

    service.remove_participant(private_room.id, "u1")

    assert service.list_participants(private_room.id) == []
    with pytest.raises(NotFound):
        service.remove_participant(private_room.id, "u1")


def test_list_rooms_hides_foreign_private_rooms(session, private_room, public_room):
    service = RoomService(session)

    assert {r.name for r in service.list_rooms("u1")} == {"rahasia", "lobby"}
    assert {r.name for r in service.list_rooms("u2")} == {"lobby"}


def test_blank_room_name(session, users):
    with pytest.raises(InvalidInput):
        RoomService(session).create_room("   ")


def test_require_member(session, private_room, public_room):
    service = RoomService(session)

    assert service.require_member(private_room.id, "u1").id == private_room.id
    assert service.require_member(public_room.id, "u2").id == public_room.id
    with pytest.raises(Forbidden):
        service.require_member(private_room.id, "u2")
    with pytest.raises(NotFound):
        service.require_member(9999, "u1")


def test_remove_participant_closes_live_subscriptions(session, channel, private_room):
    listener = QueueListener()
    other = []
    channel.subscribe(private_room.id, listener, user_id="u1")
    channel.subscribe(private_room.id, other.append, user_id="u2")

    RoomService(session, channel).remove_participant(private_room.id, "u1")

    assert listener.revoked
    assert channel.subscriber_count(private_room.id) == 1
    channel.publish(private_room.id, "after")
    assert other == ["after"]
    assert listener.queue.get_nowait() is QueueListener.REVOKED
