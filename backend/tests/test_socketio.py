def _events(sio_client, name):
    return [pkt for pkt in sio_client.get_received('/ws') if pkt['name'] == name]


def test_socket_connect(sio_client):
    assert sio_client.is_connected('/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)


def test_subscribe_sends_snapshot(client, sio_client):
    cid = client.post('/count', json={'name': 'pushups', 'targetValue': 10}).get_json()['id']
    sio_client.get_received('/ws')  # flush

    sio_client.emit('subscribe', {'id': cid}, namespace='/ws')
    received = sio_client.get_received('/ws')
    names = [pkt['name'] for pkt in received]
    assert 'subscribed' in names
    snapshot = next(pkt for pkt in received if pkt['name'] == 'countdown_update')
    assert snapshot['args'][0]['id'] == cid
    assert snapshot['args'][0]['currentValue'] == 0


def test_subscribe_unknown_countdown_reports_error(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('subscribe', {'id': 31337}, namespace='/ws')
    errors = _events(sio_client, 'error')
    assert errors and errors[0]['args'][0]['id'] == 31337


def test_subscribe_requires_id(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('subscribe', {}, namespace='/ws')
    assert _events(sio_client, 'error')


def test_mutations_are_pushed_to_subscribers(client, sio_client):
    cid = client.post('/count', json={'name': 'water', 'targetValue': 8}).get_json()['id']
    sio_client.emit('subscribe', {'id': cid}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    client.put(f'/count/{cid}', json={'increment': True})
    updates = _events(sio_client, 'countdown_update')
    assert updates and updates[-1]['args'][0]['currentValue'] == 1

    client.delete(f'/count/{cid}')
    deleted = _events(sio_client, 'countdown_deleted')
    assert deleted and deleted[0]['args'][0] == {'id': cid}


def test_unsubscribe_stops_pushes(client, sio_client):
    cid = client.post('/count', json={'name': 'water', 'targetValue': 8}).get_json()['id']
    sio_client.emit('subscribe', {'id': cid}, namespace='/ws')
    sio_client.emit('unsubscribe', {'id': cid}, namespace='/ws')
    assert _events(sio_client, 'unsubscribed')

    client.put(f'/count/{cid}', json={'increment': True})
    assert _events(sio_client, 'countdown_update') == []


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    pongs = _events(sio_client, 'pong')
    assert pongs and pongs[0]['args'][0] == {'n': 1}


def test_subscribe_with_oversized_id_reports_error(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('subscribe', {'id': 10**30}, namespace='/ws')
    errors = _events(sio_client, 'error')
    assert errors and 'not found' in errors[0]['args'][0]['message']
