"""Request identity.

Authentication happens upstream: the identity provider (or the gateway in
front of us) forwards the authenticated user id in ``AUTH_HEADER``. Flask-Login
turns that header into ``current_user`` so routes can use ``login_required``.
"""

from flask import current_app, jsonify, request
from flask_login import UserMixin

from wordspy import login_manager

MAX_USER_ID_LENGTH = 128


class Identity(UserMixin):
    def __init__(self, user_id: str):
        self.id = user_id

    def __repr__(self):
        return f'<Identity {self.id}>'


@login_manager.request_loader
def load_identity_from_request(req):
    header = current_app.config.get('AUTH_HEADER', 'X-User-Id')
    user_id = (req.headers.get(header) or '').strip()
    if not user_id or len(user_id) > MAX_USER_ID_LENGTH:
        return None
    return Identity(user_id)


@login_manager.user_loader
def load_user(user_id):
    # Sessions are not used; identity is re-read from every request
    return None


@login_manager.unauthorized_handler
def unauthorized():
    current_app.logger.info(f"[auth] unauthorized {request.method} {request.path}")
    return jsonify({'error': 'Unauthorized'}), 401
