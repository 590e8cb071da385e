"""
auth.py
-------
Password hashing and the session guard for signed-in pages.
"""

from functools import wraps

from flask import flash, jsonify, redirect, request, session, url_for
from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(password):
    return generate_password_hash(password)


def verify_password(password, password_hash):
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def login_required(view):
    """Pass the session user to the view as `user`, or bounce to /login.

    JSON requests get a 401 instead of a redirect.
    """
    @wraps(view)
    def wrapped(*args, **kwargs):
        user = session.get('user')
        if not user:
            if request.accept_mimetypes.best == 'application/json' or request.path.startswith('/api/'):
                return jsonify({'error': 'Not authenticated'}), 401
            flash('Please log in first.', 'error')
            return redirect(url_for('login'))
        return view(*args, user=user, **kwargs)
    return wrapped
