from flask_socketio import join_room, leave_room, emit
from countup import socketio, db
from countup.errors import CountupError
from countup.store import CountdownStore


def countdown_room(countdown_id) -> str:
    return f"countdown:{countdown_id}"


def _countdown_id(data):
    raw = (data or {}).get('id')
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_subscribe(data):
    countdown_id = _countdown_id(data)
    if countdown_id is None:
        emit('error', {'message': 'id is required'})
        return
    room = countdown_room(countdown_id)
    join_room(room)
    emit('subscribed', {'room': room})
    # Send the current snapshot so the subscriber does not wait for the next mutation
    try:
        snapshot = CountdownStore(db.session).get(countdown_id).to_dict()
    except CountupError as exc:
        emit('error', {'message': exc.message, 'id': countdown_id})
        return
    emit('countdown_update', snapshot)


def handle_unsubscribe(data):
    countdown_id = _countdown_id(data)
    if countdown_id is None:
        emit('error', {'message': 'id is required'})
        return
    room = countdown_room(countdown_id)
    leave_room(room)
    emit('unsubscribed', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'subscribe': handle_subscribe,
        'unsubscribe': handle_unsubscribe,
        'ping': handle_ping,
    }
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
