from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from arena import db
from arena.models import GameResult


results = Blueprint('results', __name__)

RECENT_RESULTS_LIMIT = 10
MAX_SCORE = 2 ** 31 - 1


@results.route('/profile', methods=['GET'])
@login_required
def get_profile():
    recent = (
        current_user.results.order_by(GameResult.created_at.desc(), GameResult.id.desc())
        .limit(RECENT_RESULTS_LIMIT)
        .all()
    )
    payload = current_user.to_dict()
    payload.update(current_user.stats())
    payload['recent_results'] = [r.to_dict() for r in recent]
    return jsonify(payload)


@results.route('/results', methods=['GET'])
@login_required
def list_results():
    rows = current_user.results.order_by(GameResult.created_at.desc(), GameResult.id.desc()).all()
    return jsonify([r.to_dict() for r in rows])


@results.route('/results', methods=['POST'])
@login_required
def report_result():
    """Record the outcome of a finished game for the logged-in user."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    score = data.get('score')
    won = data.get('won', False)
    if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= MAX_SCORE:
        return jsonify({'error': 'score must be a non-negative integer'}), 400
    if not isinstance(won, bool):
        return jsonify({'error': 'won must be a boolean'}), 400

    result = GameResult(user_id=current_user.id, score=score, won=won)
    db.session.add(result)
    db.session.commit()
    current_app.logger.info(f"[result] user={current_user.id} score={score} won={won}")
    return jsonify(result.to_dict()), 201
