from flask import Blueprint, Response, current_app, jsonify, request, stream_with_context
from countup import db, socketio
from countup.errors import NotFound, ValidationError
from countup.models import INTEGER_MAX, INTEGER_MIN
from countup.services.countdowns import CountdownService, LiveUpdateChannel
from countup.socketio_events import countdown_room
from countup.store import CountdownStore


countdowns = Blueprint('countdowns', __name__)

SSE_HEADERS = {
    'Cache-Control': 'no-cache',
    'Connection': 'keep-alive',
    'X-Accel-Buffering': 'no',
}


def _push_change(event, payload):
    name = 'countdown_deleted' if event == 'deleted' else 'countdown_update'
    socketio.emit(name, payload, to=countdown_room(payload['id']), namespace='/ws')


def _service() -> CountdownService:
    return CountdownService(CountdownStore(db.session), on_change=_push_change)


def _parse_id(raw) -> int:
    try:
        countdown_id = int(raw)
    except (TypeError, ValueError):
        raise ValidationError('Invalid id')
    if not INTEGER_MIN <= countdown_id <= INTEGER_MAX:
        raise NotFound(f'Countdown {countdown_id} not found')
    return countdown_id


@countdowns.route('', methods=['POST'])
def create_countdown():
    data = request.get_json(silent=True) or {}
    countdown = _service().create_countdown(data.get('name'), data.get('targetValue'))
    return jsonify(countdown.to_dict())


@countdowns.route('', methods=['GET'])
def list_countdowns():
    return jsonify([c.to_dict() for c in _service().list_countdowns()])


@countdowns.route('/<countdown_id>', methods=['GET'])
def get_countdown(countdown_id):
    return jsonify(_service().get_countdown(_parse_id(countdown_id)).to_dict())


@countdowns.route('/<countdown_id>', methods=['PUT'])
def update_countdown(countdown_id):
    cid = _parse_id(countdown_id)
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    service = _service()
    if data.get('increment') is True:
        countdown = service.increment_countdown(cid)
    elif data.get('reset') is True:
        countdown = service.reset_countdown(cid)
    elif 'currentValue' in data:
        countdown = service.set_countdown_value(cid, data['currentValue'])
    else:
        raise ValidationError('Provide either increment: true or currentValue')
    return jsonify(countdown.to_dict())


@countdowns.route('/<countdown_id>', methods=['DELETE'])
def delete_countdown(countdown_id):
    cid = _parse_id(countdown_id)
    _service().delete_countdown(cid)
    return jsonify({'message': 'Countdown deleted', 'id': cid})


def _fetch_snapshot(countdown_id):
    # Release the connection between polls; the stream can stay open for hours
    try:
        return CountdownStore(db.session).get(countdown_id).to_dict()
    finally:
        db.session.remove()


@countdowns.route('/<countdown_id>/events', methods=['GET'])
def countdown_events(countdown_id):
    cid = _parse_id(countdown_id)
    interval = float(current_app.config.get('LIVE_UPDATE_INTERVAL_SEC', 10))
    channel = LiveUpdateChannel(cid, _fetch_snapshot, interval=interval)
    logger = current_app.logger
    logger.info(f"[stream-open] countdown={cid} interval={interval}s")

    def _generate():
        try:
            yield from channel.frames()
        finally:
            logger.info(f"[stream-closed] countdown={cid}")

    response = Response(
        stream_with_context(_generate()),
        mimetype='text/event-stream',
        headers=SSE_HEADERS,
    )
    # Also covers bodies that are never iterated (HEAD, early disconnect)
    response.call_on_close(channel.close)
    return response
