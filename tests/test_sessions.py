from audiopong.sessions import SessionRegistry


def _connect(registry, make_socket, n):
    return [registry.connect(make_socket()).client_id for _ in range(n)]


def _assert_exclusive(registry):
    if registry.left_id is not None or registry.right_id is not None:
        assert registry.left_id != registry.right_id
    for side in ('left', 'right'):
        holder = registry.holder(side)
        if holder is not None:
            assert holder.role == 'player'


def test_new_session_is_spectator(make_socket):
    registry = SessionRegistry()
    session = registry.connect(make_socket())
    assert session.role == 'spectator'
    assert session.player.max_ref == 0.6
    assert registry.side_of(session.client_id) is None


def test_third_player_is_told_spectator(make_socket):
    registry = SessionRegistry()
    a, b, c = _connect(registry, make_socket, 3)
    assert registry.declare_role(a, 'player') == [(a, 'left')]
    assert registry.declare_role(b, 'player') == [(b, 'right')]
    assert registry.declare_role(c, 'player') == [(c, 'spectator')]
    # still recorded as a player
    assert registry.get(c).role == 'player'
    _assert_exclusive(registry)


def test_disconnect_backfills_with_waiting_player(make_socket):
    registry = SessionRegistry()
    a, b, c = _connect(registry, make_socket, 3)
    registry.declare_role(a, 'player')
    registry.declare_role(b, 'player')
    registry.declare_role(c, 'spectator')
    registry.declare_role(c, 'player')

    notices = registry.disconnect(a)

    assert notices == [(c, 'left')]
    assert registry.left_id == c
    assert registry.right_id == b
    _assert_exclusive(registry)


def test_backfill_scans_in_registration_order(make_socket):
    registry = SessionRegistry()
    a, b, c, d = _connect(registry, make_socket, 4)
    for client_id in (a, b, d, c):
        registry.declare_role(client_id, 'player')
    assert registry.disconnect(b) == [(c, 'right')]


def test_disconnect_without_candidates_leaves_slot_empty(make_socket):
    registry = SessionRegistry()
    a, b = _connect(registry, make_socket, 2)
    registry.declare_role(a, 'player')
    registry.declare_role(b, 'board')
    assert registry.disconnect(a) == []
    assert registry.left_id is None
    assert len(registry) == 1


def test_non_player_role_releases_slot(make_socket):
    registry = SessionRegistry()
    a, b, c = _connect(registry, make_socket, 3)
    registry.declare_role(a, 'player')
    registry.declare_role(b, 'player')
    registry.declare_role(c, 'player')

    notices = registry.declare_role(a, 'calibrate')

    assert registry.side_of(a) is None
    assert notices == [(c, 'left')]
    _assert_exclusive(registry)


def test_repeated_hello_keeps_slot(make_socket):
    registry = SessionRegistry()
    (a,) = _connect(registry, make_socket, 1)
    registry.declare_role(a, 'player')
    assert registry.declare_role(a, 'player') == [(a, 'left')]
    assert registry.right_id is None


def test_is_connected_requires_open_socket(make_socket):
    registry = SessionRegistry()
    ws = make_socket()
    session = registry.connect(ws)
    registry.declare_role(session.client_id, 'player')
    assert registry.is_connected('left')
    ws.closed = True
    assert not registry.is_connected('left')
    assert not registry.is_connected('right')


def test_exclusivity_over_churn(make_socket):
    registry = SessionRegistry()
    ids = _connect(registry, make_socket, 6)
    for client_id in ids:
        registry.declare_role(client_id, 'player')
    for client_id in (ids[0], ids[3], ids[1], ids[5]):
        registry.disconnect(client_id)
        _assert_exclusive(registry)
    assert {registry.left_id, registry.right_id} == {ids[2], ids[4]}


def test_unknown_client_is_ignored():
    registry = SessionRegistry()
    assert registry.declare_role('nobody', 'player') == []
    assert registry.disconnect('nobody') == []
