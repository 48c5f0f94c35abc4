from scoreboard.services.scoring import registry


def test_create_and_lookup_is_case_insensitive():
    code, engine = registry.create_board()
    try:
        assert len(code) == 4
        assert registry.get_board(code.lower()) is engine
        assert registry.get_board('') is None
    finally:
        registry.clear_boards()


def test_idle_ttl_evicts_untouched_boards(monkeypatch):
    now = [0.0]
    monkeypatch.setattr(registry, '_clock', lambda: now[0])
    try:
        old_code, _ = registry.create_board()
        now[0] = 100.0
        new_code, _ = registry.create_board(idle_ttl=50)
        assert registry.get_board(old_code) is None
        assert registry.get_board(new_code) is not None
        assert registry.board_count() == 1
    finally:
        registry.clear_boards()


def test_zero_ttl_keeps_boards(monkeypatch):
    now = [0.0]
    monkeypatch.setattr(registry, '_clock', lambda: now[0])
    try:
        code, _ = registry.create_board()
        now[0] = 10 ** 6
        assert registry.evict_idle_boards(0) == 0
        assert registry.get_board(code, idle_ttl=0) is not None
    finally:
        registry.clear_boards()


def test_drop_board():
    code, _ = registry.create_board()
    assert registry.drop_board(code) is True
    assert registry.drop_board(code) is False
    assert registry.get_board(code) is None
