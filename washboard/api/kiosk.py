from flask import Blueprint, jsonify, request, current_app
from washboard import get_services
from washboard.errors import StorageUnavailable
from washboard.services.leaderboard import normalize_limit, normalize_range


kiosk = Blueprint('kiosk', __name__)


def _services():
    return get_services(current_app)


@kiosk.route('/session', methods=['POST'])
def issue_session():
    data = request.get_json(silent=True) or {}
    play_session = _services().sessions.issue(data.get('locationId'))
    payload = play_session.to_dict()
    payload['ok'] = True
    return jsonify(payload), 201


@kiosk.route('/score', methods=['POST'])
def submit_score():
    data = request.get_json(silent=True) or {}
    score = _services().ledger.submit(
        data.get('locationId'),
        data.get('token'),
        data.get('score'),
        data.get('nickname'),
    )
    return jsonify({'ok': True, 'score': score.to_dict()}), 201


@kiosk.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    location_id = (request.args.get('locationId') or '').strip()
    range_key = normalize_range(request.args.get('range'))
    limit = normalize_limit(request.args.get('limit'))
    entries = _services().leaderboard.rank(location_id, range_key, limit)
    return jsonify({
        'ok': True,
        'locationId': location_id,
        'range': range_key,
        'limit': limit,
        'entries': [e.to_dict() for e in entries],
    })


@kiosk.route('/dbcheck', methods=['GET'])
def dbcheck():
    try:
        ok = _services().store.ping()
    except StorageUnavailable:
        return jsonify({'ok': False}), 503
    return jsonify({'ok': ok}), 200 if ok else 503
