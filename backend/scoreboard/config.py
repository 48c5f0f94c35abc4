import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Browser origins allowed to call the API (comma separated)
    CORS_ORIGINS = [
        o.strip()
        for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',')
        if o.strip()
    ]
    # Length of generated board codes
    BOARD_CODE_LENGTH = int(os.environ.get('BOARD_CODE_LENGTH', '4'))
    # Grace period before a board is dropped once its owner disconnects (seconds)
    SESSION_END_GRACE_SEC = float(os.environ.get('SESSION_END_GRACE_SEC', '2'))
    # Boards untouched for this long are evicted from memory (seconds). 0 disables.
    BOARD_IDLE_TTL_SEC = float(os.environ.get('BOARD_IDLE_TTL_SEC', '21600'))
