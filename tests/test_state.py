from audiopong.state import GameConfig, GameState, sanitize_config


def test_accel_clamped_and_rest_unchanged():
    config = GameConfig().merged({'ballAccelOnBounce': 10})
    assert config.ball_accel_on_bounce == 1.5
    assert config.court_width == 1000
    assert config.ball_speed == 380
    assert config.hearts_per_player == 5


def test_invalid_fields_dropped():
    config = GameConfig().merged({
        'courtWidth': 50,          # below minimum
        'courtHeight': '800',      # wrong type
        'paddleWidth': True,       # bools are not numbers
        'ballRadius': float('nan'),
        'bogus': 3,
        'ballSpeed': 500,
    })
    assert config.court_width == 1000
    assert config.court_height == 600
    assert config.paddle_width == 16
    assert config.ball_radius == 8
    assert config.ball_speed == 500


def test_caps_and_floors():
    out = sanitize_config({
        'courtWidth': 99999,
        'heartsPerPlayer': 7.9,
        'ballRadius': 41,
        'paddleHeight': 20,
    })
    assert out == {
        'court_width': 4000,
        'hearts_per_player': 7,
        'ball_radius': 40,
        'paddle_height': 20,
    }
    assert sanitize_config({'heartsPerPlayer': 50}) == {'hearts_per_player': 20}


def test_merge_keeps_previous_values():
    first = GameConfig().merged({'courtWidth': 1200})
    second = first.merged({'courtHeight': 700})
    assert second.court_width == 1200
    assert second.court_height == 700


def test_wire_shapes():
    config = GameConfig()
    assert config.to_dict() == {
        'courtWidth': 1000,
        'courtHeight': 600,
        'paddleWidth': 16,
        'paddleHeight': 120,
        'ballSpeed': 380,
        'ballAccelOnBounce': 1.05,
        'heartsPerPlayer': 5,
        'ballRadius': 8,
    }
    state = GameState.initial(config).to_dict()
    assert state['ballPos'] == {'x': 500, 'y': 300}
    assert state['heartsLeft'] == state['heartsRight'] == 5
    assert state['leftMaxRef'] == 0.6
    assert state['running'] is False


def test_huge_integers_are_capped():
    out = sanitize_config({'ballSpeed': 10 ** 400, 'heartsPerPlayer': 10 ** 400, 'courtWidth': -10 ** 400})
    assert out == {'ball_speed': 2000, 'hearts_per_player': 20}
