from flask import Blueprint, jsonify, request, current_app
from flask_login import current_user, login_required

from wordspy import db
from wordspy.models import UserProfile

profiles = Blueprint('profiles', __name__)

MAX_BATCH = 50
MAX_NICKNAME_LENGTH = 64
MAX_PHOTO_URL_LENGTH = 512


def _public(profile):
    if profile is None:
        return None
    return {'nickname': profile.nickname, 'profile_photo_url': profile.profile_photo_url}


@profiles.route('/profile', methods=['GET'])
@login_required
def get_profile():
    profile = UserProfile.query.filter_by(user_id=current_user.get_id()).first()
    return jsonify({'profile': profile.to_dict() if profile else None})


@profiles.route('/profile', methods=['POST'])
@login_required
def update_profile():
    data = request.get_json(silent=True) or {}
    nickname = data.get('nickname')
    photo_url = data.get('profile_photo_url')
    if nickname is not None and (not isinstance(nickname, str) or len(nickname.strip()) > MAX_NICKNAME_LENGTH):
        return jsonify({'error': f'Nickname must be at most {MAX_NICKNAME_LENGTH} characters'}), 400
    if photo_url is not None and (not isinstance(photo_url, str) or len(photo_url) > MAX_PHOTO_URL_LENGTH):
        return jsonify({'error': 'Invalid profile_photo_url'}), 400

    user_id = current_user.get_id()
    profile = UserProfile.query.filter_by(user_id=user_id).first()
    created = profile is None
    if created:
        profile = UserProfile(user_id=user_id)
    # Fields left out of the request keep their value
    if nickname is not None:
        profile.nickname = nickname.strip() or None
    if photo_url is not None:
        profile.profile_photo_url = photo_url or None
    db.session.add(profile)
    db.session.commit()
    current_app.logger.info(f"[profile] {'created' if created else 'updated'} user={user_id}")
    return jsonify({'profile': profile.to_dict()}), 201 if created else 200


@profiles.route('/profiles/batch', methods=['POST'])
@login_required
def get_profiles_batch():
    data = request.get_json(silent=True) or {}
    user_ids = data.get('user_ids')
    if not isinstance(user_ids, list) or not user_ids:
        return jsonify({'profiles': {}})
    user_ids = [u for u in user_ids if isinstance(u, str)][:MAX_BATCH]
    found = {p.user_id: p for p in UserProfile.query.filter(UserProfile.user_id.in_(user_ids)).all()}
    return jsonify({'profiles': {u: _public(found.get(u)) for u in user_ids}})
