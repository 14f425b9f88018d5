from flask import Blueprint, jsonify, request, current_app
from flask_login import login_user, current_user
from courtside.models import GameRecord, AdminSeat, generate_game_code, hash_password, check_password, is_valid_code
from courtside.services.games import catalog, registry, store
from courtside.services.games.actions import SIDES
from courtside.services.games.errors import GameError, ValidationError, AuthorizationError, NotFoundError
from courtside.services.games.scheduler import start_clock_ticker, stop_clock_ticker, is_ticking
from courtside.services.games.session import GameSession
from courtside.services.games.state import Settings, LIVE


games = Blueprint('games', __name__)


@games.errorhandler(GameError)
def handle_game_error(exc):
    return jsonify(exc.to_dict()), exc.status_code


def _normalize_code(game_code):
    code = (game_code or '').strip().upper()
    if not is_valid_code(code):
        raise ValidationError('Please enter a valid 6-character game code.')
    return code


def _require_admin(code):
    if not (current_user.is_authenticated and current_user.can_control(code)):
        raise AuthorizationError('Admin access required')


def _payload(session):
    data = session.to_dict()
    data['poll_interval'] = int(current_app.config.get('VIEWER_POLL_SEC', 2))
    data['undo_depth'] = len(session.undo_ledger)
    return data


def _float_arg(data, name):
    try:
        return float(data[name])
    except (KeyError, TypeError, ValueError):
        raise ValidationError(f'{name} is required and must be a number') from None


def _location(data):
    if data.get('x') is None and data.get('y') is None:
        return None
    return _float_arg(data, 'x'), _float_arg(data, 'y')


def _sync_ticker(session):
    app = current_app._get_current_object()
    if session.status == LIVE:
        if not is_ticking(session.code):
            start_clock_ticker(app, session.code)
    else:
        stop_clock_ticker(session.code)


def _admin_mutation(game_code, mutate):
    """Run one admin operation on a locked session, then persist and broadcast."""
    code = _normalize_code(game_code)
    _require_admin(code)
    with registry.locked(code) as session:
        result = mutate(session)
        registry.commit(session)
        _sync_ticker(session)
        payload = _payload(session)
    return result, payload


@games.route('/create', methods=['POST'])
def create_game():
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    password = (data.get('password') or '').strip()
    if not password:
        raise ValidationError('Please enter an admin password to create the game.')

    settings = Settings(court_standard=current_app.config.get('DEFAULT_COURT_STANDARD', 'fiba'))
    session = GameSession(
        code=generate_game_code(),
        name=name,
        password_hash=hash_password(password),
        settings=settings,
        undo_capacity=int(current_app.config.get('UNDO_LIMIT', 20)),
        play_by_play_limit=int(current_app.config.get('PLAY_BY_PLAY_LIMIT', 50)),
    )
    registry.put(session)
    store.save(session.code, session)
    login_user(AdminSeat(session.code))
    current_app.logger.info(f"[create] game={session.code} name={session.name!r}")
    return jsonify({
        'message': 'New game created!',
        'game_code': session.code,
    }), 201


@games.route('/', methods=['GET'])
def list_games():
    return jsonify([record.to_summary() for record in store.list_sessions()])


@games.route('/join', methods=['POST'])
def join_game():
    data = request.get_json(silent=True) or {}
    code = _normalize_code(data.get('game_code'))
    record = GameRecord.query.filter_by(code=code).first()
    if not record:
        raise NotFoundError('Game not found')
    return jsonify({'game_code': code, 'status': record.status, 'role': 'viewer'}), 200


@games.route('/<string:game_code>/admin', methods=['POST'])
def admin_login(game_code):
    code = _normalize_code(game_code)
    data = request.get_json(silent=True) or {}
    password = data.get('password') or ''
    if not password:
        raise ValidationError('Please enter both game code and password.')
    record = GameRecord.query.filter_by(code=code).first()
    if not record:
        raise NotFoundError('Game not found')
    if not check_password(record.password_hash, password):
        current_app.logger.info(f"[admin-denied] game={code}")
        raise AuthorizationError('Incorrect password')
    login_user(AdminSeat(code))
    current_app.logger.info(f"[admin-login] game={code}")
    return jsonify({'game_code': code, 'status': record.status, 'role': 'admin'}), 200


@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    code = _normalize_code(game_code)
    record = GameRecord.query.filter_by(code=code).first()
    if not record:
        raise NotFoundError('Game not found')
    since = request.args.get('since')
    if since and since == record.last_updated:
        return jsonify({'changed': False, 'last_updated': record.last_updated})
    payload = record.snapshot
    payload['changed'] = True
    payload['poll_interval'] = int(current_app.config.get('VIEWER_POLL_SEC', 2))
    return jsonify(payload)


@games.route('/<string:game_code>/settings', methods=['PUT'])
def update_settings(game_code):
    data = dict(request.get_json(silent=True) or {})
    name = data.pop('name', None)
    _, payload = _admin_mutation(game_code, lambda s: s.configure(name=name, **data))
    return jsonify(payload)


@games.route('/<string:game_code>/teams/<string:side>', methods=['PUT'])
def update_team(game_code, side):
    data = request.get_json(silent=True) or {}
    _, payload = _admin_mutation(
        game_code, lambda s: s.update_team(side, name=data.get('name'), color=data.get('color')))
    return jsonify(payload)


@games.route('/<string:game_code>/teams/<string:side>/players', methods=['POST'])
def add_player(game_code, side):
    data = request.get_json(silent=True) or {}
    player, _ = _admin_mutation(
        game_code, lambda s: s.add_player(side, data.get('name'), data.get('number'), data.get('position')))
    return jsonify(player.to_dict()), 201


@games.route('/<string:game_code>/teams/<string:side>/players/<string:player_id>', methods=['DELETE'])
def remove_player(game_code, side, player_id):
    _, payload = _admin_mutation(game_code, lambda s: s.remove_player(side, player_id))
    return jsonify(payload)


@games.route('/<string:game_code>/start', methods=['POST'])
def start_game(game_code):
    _, payload = _admin_mutation(game_code, lambda s: s.start())
    current_app.logger.info(f"[start] game={payload['code']}")
    return jsonify(payload)


@games.route('/<string:game_code>/clock/start', methods=['POST'])
def start_clock(game_code):
    _, payload = _admin_mutation(game_code, lambda s: s.start_clock())
    current_app.logger.info(f"[clock-start] game={payload['code']} period={payload['game_state']['period']}")
    return jsonify(payload)


@games.route('/<string:game_code>/clock/pause', methods=['POST'])
def pause_clock(game_code):
    _, payload = _admin_mutation(game_code, lambda s: s.pause_clock())
    current_app.logger.info(f"[clock-pause] game={payload['code']} clock={payload['clock']}")
    return jsonify(payload)


@games.route('/<string:game_code>/clock/reset', methods=['POST'])
def reset_game_clock(game_code):
    _, payload = _admin_mutation(game_code, lambda s: s.reset_game_clock())
    return jsonify(payload)


@games.route('/<string:game_code>/shot-clock/reset', methods=['POST'])
def reset_shot_clock(game_code):
    _, payload = _admin_mutation(game_code, lambda s: s.reset_shot_clock())
    return jsonify(payload)


@games.route('/<string:game_code>/period/next', methods=['POST'])
def next_period(game_code):
    _, payload = _admin_mutation(game_code, lambda s: s.next_period())
    current_app.logger.info(f"[period-end] game={payload['code']} manual status={payload['status']}")
    return jsonify(payload)


@games.route('/<string:game_code>/end', methods=['POST'])
def end_game(game_code):
    _, payload = _admin_mutation(game_code, lambda s: s.end())
    current_app.logger.info(f"[finish] game={payload['code']} scores={payload['game_state']['scores']}")
    return jsonify(payload)


@games.route('/<string:game_code>/zone', methods=['GET'])
def zone_menu(game_code):
    """Zone, distance and action menu for a tapped court point."""
    code = _normalize_code(game_code)
    x = _float_arg(request.args, 'x')
    y = _float_arg(request.args, 'y')
    tier = request.args.get('tier', catalog.PRIMARY)
    session = registry.get(code)
    zone = session.classifier.classify(x, y)
    return jsonify({
        'zone': zone.to_dict(),
        'distance': f'{session.classifier.distance(x, y):.1f}',
        'tier': tier,
        'options': [option.to_dict() for option in catalog.menu(zone.name, tier)],
    })


@games.route('/<string:game_code>/actions', methods=['POST'])
def record_action(game_code):
    data = request.get_json(silent=True) or {}
    action, payload = _admin_mutation(game_code, lambda s: s.record(
        catalog.resolve(data.get('code')), data.get('player_id'), _location(data)))
    current_app.logger.info(
        f"[action] game={payload['code']} code={action.code} player={action.player_id} team={action.team}"
    )
    return jsonify({'action': action.to_dict(), 'game': payload}), 201


@games.route('/<string:game_code>/quick', methods=['POST'])
def record_quick_stat(game_code):
    data = request.get_json(silent=True) or {}
    action, payload = _admin_mutation(
        game_code, lambda s: s.record(catalog.quick_stat(data.get('stat')), data.get('player_id')))
    current_app.logger.info(
        f"[action] game={payload['code']} quick={data.get('stat')} player={action.player_id} team={action.team}"
    )
    return jsonify({'action': action.to_dict(), 'game': payload}), 201


@games.route('/<string:game_code>/team-stats', methods=['POST'])
def adjust_team_stat(game_code):
    data = request.get_json(silent=True) or {}
    _, payload = _admin_mutation(
        game_code,
        lambda s: s.adjust_team_stat(data.get('team'), data.get('stat'), data.get('delta', 1),
                                     confirmed=bool(data.get('confirmed'))),
    )
    return jsonify(payload)


@games.route('/<string:game_code>/undo', methods=['POST'])
def undo_last_action(game_code):
    entry, payload = _admin_mutation(game_code, lambda s: s.undo())
    if entry is None:
        return jsonify({'message': 'Nothing to undo', 'game': payload}), 200
    current_app.logger.info(f"[undo] game={payload['code']} action={entry.action.id}")
    return jsonify({'message': 'Action Undone', 'undone': entry.action.id, 'game': payload}), 200


@games.route('/<string:game_code>/actions', methods=['GET'])
def list_actions(game_code):
    code = _normalize_code(game_code)
    session = registry.get(code)
    side = request.args.get('team')
    actions = session.actions_for_team(side) if side else session.actions
    return jsonify([a.to_dict() for a in actions])


@games.route('/<string:game_code>/box-score/<string:side>', methods=['GET'])
def box_score(game_code, side):
    code = _normalize_code(game_code)
    if side not in SIDES:
        raise ValidationError(f'Unknown team: {side}')
    return jsonify(registry.get(code).box_score(side))
