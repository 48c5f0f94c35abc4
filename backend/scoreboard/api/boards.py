from flask import Blueprint, abort, current_app, jsonify, request
from scoreboard import socketio
from scoreboard.services.scoring.catalog import catalog_to_dict, normalize_color
from scoreboard.services.scoring.registry import create_board, get_board
from scoreboard.socketio_events import board_room, board_state_payload, end_board_session


boards = Blueprint('boards', __name__)


def _idle_ttl():
    return float(current_app.config.get('BOARD_IDLE_TTL_SEC', 0))


def _get_board_or_404(board_code):
    engine = get_board(board_code, _idle_ttl())
    if engine is None:
        abort(404)
    return engine


def _emit_state_update(board_code: str) -> None:
    code = board_code.upper()
    socketio.emit('state_update', {'board_code': code}, to=board_room(code), namespace='/ws')


@boards.errorhandler(404)
def _not_found(_exc):
    return jsonify({'error': 'Board not found'}), 404


@boards.route('/catalog', methods=['GET'])
def get_catalog():
    return jsonify(catalog_to_dict())


@boards.route('/create', methods=['POST'])
def create_board_route():
    code, engine = create_board(int(current_app.config.get('BOARD_CODE_LENGTH', 4)), _idle_ttl())
    current_app.logger.info(f"[board-create] board={code}")
    payload = board_state_payload(code, engine)
    payload['message'] = 'New board created!'
    return jsonify(payload), 201


@boards.route('/<string:board_code>/state', methods=['GET'])
def get_board_state(board_code):
    engine = _get_board_or_404(board_code)
    return jsonify(board_state_payload(board_code, engine))


@boards.route('/<string:board_code>/houses/<int:house_index>', methods=['PUT'])
def edit_house(board_code, house_index):
    engine = _get_board_or_404(board_code)
    data = request.get_json(silent=True) or {}
    items = data.get('items')
    cards = data.get('cards')
    if not isinstance(items, dict) or not isinstance(cards, dict):
        return jsonify({'error': 'items and cards mappings are required'}), 400

    house = engine.apply_house_edit(house_index, items, cards)
    if house is None:
        return jsonify({'error': f'No house at index {house_index}'}), 404

    _emit_state_update(board_code)
    payload = house.to_dict()
    payload['index'] = house_index
    payload['summary'] = engine.house_summary(house_index)
    payload['total_points'] = engine.compute_total_points()
    return jsonify(payload)


@boards.route('/<string:board_code>/colors/<string:color>/delta', methods=['POST'])
def add_color_items(board_code, color):
    engine = _get_board_or_404(board_code)
    data = request.get_json(silent=True) or {}
    items = data.get('items')
    if not isinstance(items, dict):
        return jsonify({'error': 'items mapping is required'}), 400

    affected = engine.apply_color_delta(color, items)
    if affected is None:
        return jsonify({'error': f'Unknown color {color}'}), 404

    _emit_state_update(board_code)
    return jsonify({
        'color': normalize_color(color),
        'houses': [h.to_dict() for h in affected],
        'total_points': engine.compute_total_points(),
    })


@boards.route('/<string:board_code>/colors/<string:color>/bonuses/<string:item_key>/toggle', methods=['POST'])
def toggle_bonus(board_code, color, item_key):
    engine = _get_board_or_404(board_code)
    value = engine.toggle_color_bonus(color, item_key)
    if value is None:
        return jsonify({'error': f'Unknown color or item: {color}/{item_key}'}), 404

    _emit_state_update(board_code)
    normalized = normalize_color(color)
    return jsonify({
        'color': normalized,
        'item': item_key,
        'value': value,
        'bonuses': engine.color_bonuses[normalized],
        'total_points': engine.compute_total_points(),
    })


@boards.route('/<string:board_code>/score', methods=['POST'])
def score_round(board_code):
    engine = _get_board_or_404(board_code)
    result = engine.run_scoring_round()
    current_app.logger.info(f"[round] board={board_code.upper()} round={result.round_number} total={result.total}")

    code = board_code.upper()
    socketio.emit('round_scored', result.to_dict(), to=board_room(code), namespace='/ws')
    _emit_state_update(board_code)
    payload = result.to_dict()
    payload['state'] = board_state_payload(board_code, engine)
    return jsonify(payload)


@boards.route('/<string:board_code>/reset', methods=['POST'])
def reset_board(board_code):
    engine = _get_board_or_404(board_code)
    engine.reset_board()
    _emit_state_update(board_code)
    return jsonify(board_state_payload(board_code, engine))


@boards.route('/<string:board_code>', methods=['DELETE'])
def end_board(board_code):
    _get_board_or_404(board_code)
    end_board_session(board_code.upper())
    return jsonify({'message': 'Board session ended', 'board_code': board_code.upper()})
