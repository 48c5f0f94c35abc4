"""Socket.IO handlers for live board rooms on the '/ws' namespace.

Clients join ``board:<CODE>`` to receive ``state_update``, ``round_scored``
and ``session_ended``. A joining client is sent the full board state right
away so a late joiner renders the same houses, totals and round history as
everyone else. The board is dropped once its last session owner leaves or
disconnects.
"""
import time
from typing import Any, Dict

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from scoreboard import socketio
from scoreboard.services.scoring.registry import drop_board, get_board

NAMESPACE = '/ws'

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_owner_count: Dict[str, int] = {}
_end_deadline: Dict[str, float] = {}


def board_room(board_code: str) -> str:
    return f"board:{board_code.upper()}"


def board_state_payload(board_code: str, engine) -> Dict[str, Any]:
    payload = engine.to_dict()
    payload['board_code'] = board_code.upper()
    last = engine.round_history[-1] if engine.round_history else None
    payload['last_round'] = last.to_dict() if last else None
    return payload


def end_board_session(board_code: str) -> None:
    """Notify the board room that the session is over and drop the board."""
    code = board_code.upper()
    socketio.emit('session_ended', {'board_code': code}, to=board_room(code), namespace=NAMESPACE)
    drop_board(code)
    _owner_count.pop(code, None)
    _end_deadline.pop(code, None)


def _board_code_from(data):
    board_code = (data or {}).get('board_code')
    if not board_code:
        emit('error', {'message': 'board_code is required'})
        return None
    return str(board_code).upper()


def handle_connect(*_args):
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def handle_join_board(data):
    code = _board_code_from(data)
    if code is None:
        return
    is_session_owner = bool((data or {}).get('is_session_owner'))
    join_room(board_room(code))
    _sid_to_ctx[request.sid] = {'board_code': code, 'is_session_owner': is_session_owner}
    if is_session_owner:
        _owner_count[code] = _owner_count.get(code, 0) + 1
        _end_deadline.pop(code, None)

    engine = get_board(code, float(current_app.config.get('BOARD_IDLE_TTL_SEC', 0)))
    emit('joined', {'room': board_room(code), 'board_exists': engine is not None})
    if engine is not None:
        emit('board_state', board_state_payload(code, engine))


def handle_leave_board(data):
    code = _board_code_from(data)
    if code is None:
        return
    leave_room(board_room(code))
    emit('left', {'room': board_room(code)})
    # An owner quitting explicitly ends the board without a grace period
    ctx = _sid_to_ctx.get(request.sid)
    if ctx and ctx['is_session_owner'] and ctx['board_code'] == code:
        end_board_session(code)


def handle_disconnect(*_args):
    ctx = _sid_to_ctx.pop(request.sid, None)
    if not ctx or not ctx['is_session_owner']:
        return
    code = ctx['board_code']
    _owner_count[code] = max(0, _owner_count.get(code, 0) - 1)
    if _owner_count[code]:
        return
    grace = float(current_app.config.get('SESSION_END_GRACE_SEC', 0))
    # Tests end immediately so the outcome is deterministic
    if current_app.config.get('TESTING') or grace <= 0:
        end_board_session(code)
        return
    _schedule_end(code, grace)


def handle_ping(data):
    emit('pong', data or {})


def _schedule_end(board_code: str, delay_sec: float) -> None:
    deadline = time.time() + delay_sec
    _end_deadline[board_code] = deadline

    def _runner():
        socketio.sleep(max(0.0, deadline - time.time()))
        # A rejoining owner clears or replaces the deadline
        if _owner_count.get(board_code, 0) == 0 and _end_deadline.get(board_code) == deadline:
            end_board_session(board_code)

    socketio.start_background_task(_runner)


def register_socketio_handlers() -> None:
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('join_board', handle_join_board, namespace=NAMESPACE)
    socketio.on_event('leave_board', handle_leave_board, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
