import logging
import random
import string
import threading
import time
from typing import Dict, Optional

from .engine import ScoringEngine

logger = logging.getLogger(__name__)

_boards: Dict[str, ScoringEngine] = {}
_last_touched: Dict[str, float] = {}
_boards_lock = threading.Lock()
_clock = time.monotonic


def generate_board_code(length=4):
    """Generate a unique, short board code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in _boards:
            return code


def _evict_idle_locked(idle_ttl, now: float) -> int:
    if not idle_ttl or idle_ttl <= 0:
        return 0
    stale = [code for code, touched in _last_touched.items() if now - touched > idle_ttl]
    for code in stale:
        _boards.pop(code, None)
        _last_touched.pop(code, None)
    if stale:
        logger.info(f"[board-evict] idle_ttl={idle_ttl}s boards={','.join(stale)}")
    return len(stale)


def evict_idle_boards(idle_ttl) -> int:
    """Drop boards nobody has touched for more than ``idle_ttl`` seconds."""
    with _boards_lock:
        return _evict_idle_locked(idle_ttl, _clock())


def create_board(code_length=4, idle_ttl=None):
    with _boards_lock:
        now = _clock()
        _evict_idle_locked(idle_ttl, now)
        code = generate_board_code(code_length)
        engine = ScoringEngine()
        _boards[code] = engine
        _last_touched[code] = now
    logger.info(f"[board-create] board={code}")
    return code, engine


def get_board(code, idle_ttl=None) -> Optional[ScoringEngine]:
    """Look up a board by code (case-insensitive) and mark it as used."""
    if not code:
        return None
    code = str(code).upper()
    with _boards_lock:
        now = _clock()
        _evict_idle_locked(idle_ttl, now)
        engine = _boards.get(code)
        if engine is not None:
            _last_touched[code] = now
        return engine


def board_count() -> int:
    return len(_boards)


def drop_board(code) -> bool:
    if not code:
        return False
    code = str(code).upper()
    with _boards_lock:
        removed = _boards.pop(code, None)
        _last_touched.pop(code, None)
    if removed is not None:
        logger.info(f"[board-drop] board={code}")
    return removed is not None


def clear_boards() -> None:
    with _boards_lock:
        _boards.clear()
        _last_touched.clear()
