def test_socket_connect_and_join(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    # Join a room and expect a joined ack
    sio_client.emit('join_board', {'board_code': 'abcd'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    joined = [pkt for pkt in received if pkt['name'] == 'joined']
    assert joined and joined[0]['args'][0]['room'] == 'board:ABCD'


def test_join_without_code_errors(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_board', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'error' for pkt in received)


def test_ping(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)


def test_board_changes_broadcast_to_room(sio_client, client, board_code):
    sio_client.emit('join_board', {'board_code': board_code}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    client.put(f'/api/boards/{board_code}/houses/2', json={'items': {'redGift': 2}, 'cards': {'x4RedGift': 1}})
    events = sio_client.get_received('/ws')
    assert any(e['name'] == 'state_update' and e['args'][0]['board_code'] == board_code for e in events)

    client.post(f'/api/boards/{board_code}/score')
    events = sio_client.get_received('/ws')
    scored = [e for e in events if e['name'] == 'round_scored']
    assert scored and scored[0]['args'][0]['total'] == 8


def test_owner_disconnect_ends_session(flask_app, sio_client, client, board_code):
    from scoreboard import socketio as _sio
    host_client = _sio.test_client(flask_app, namespace='/ws')
    host_client.emit('join_board', {'board_code': board_code, 'is_session_owner': True}, namespace='/ws')

    # Guest joins
    sio_client.emit('join_board', {'board_code': board_code}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    # Disconnect owner -> expect session_ended for guest and the board dropped
    host_client.disconnect(namespace='/ws')
    events = sio_client.get_received('/ws')
    assert any(e['name'] == 'session_ended' for e in events)
    assert client.get(f'/api/boards/{board_code}/state').status_code == 404


def test_owner_leave_ends_session(flask_app, client, board_code):
    from scoreboard import socketio as _sio
    host_client = _sio.test_client(flask_app, namespace='/ws')
    host_client.emit('join_board', {'board_code': board_code, 'is_session_owner': True}, namespace='/ws')
    host_client.emit('leave_board', {'board_code': board_code}, namespace='/ws')
    received = host_client.get_received('/ws')
    assert any(pkt['name'] == 'left' for pkt in received)
    assert client.get(f'/api/boards/{board_code}/state').status_code == 404
    host_client.disconnect(namespace='/ws')


def test_late_joiner_receives_board_state(sio_client, client, board_code):
    client.put(f'/api/boards/{board_code}/houses/2', json={'items': {'redGift': 2}, 'cards': {'x4RedGift': 1}})
    client.post(f'/api/boards/{board_code}/score')
    client.put(f'/api/boards/{board_code}/houses/3', json={'items': {'blueGift': 3}, 'cards': {}})
    sio_client.get_received('/ws')

    sio_client.emit('join_board', {'board_code': board_code.lower()}, namespace='/ws')
    received = sio_client.get_received('/ws')

    joined = [e for e in received if e['name'] == 'joined']
    assert joined[0]['args'][0]['board_exists'] is True
    states = [e for e in received if e['name'] == 'board_state']
    assert states
    state = states[0]['args'][0]
    assert state['board_code'] == board_code
    assert state['total_points'] == 3
    assert state['last_round']['total'] == 8
    assert state['current_round'] == 1


def test_join_unknown_board_sends_no_state(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_board', {'board_code': 'QQQQ'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert [e['args'][0]['board_exists'] for e in received if e['name'] == 'joined'] == [False]
    assert not any(e['name'] == 'board_state' for e in received)
