import logging

from flask import Flask, request, render_template, redirect, jsonify, session, flash, url_for, current_app

import config
from auth import hash_password, verify_password, login_required
from leaderboard import compute_leaderboard, total_quantity, ALL_DEPARTMENTS
from models import new_trash_document, new_user_document, session_user
from store import MongoStore
from validation import (
    client_rules,
    validate_entry,
    validate_entry_update,
    validate_login,
    validate_registration,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

application = Flask(__name__)
application.secret_key = config.SECRET_KEY  # Required for session
application.config.update(
    STORE=None,  # created on first use, tests put their own store here
    STRICT_MODE=config.STRICT_MODE,
    INSTITUTION_EMAIL_DOMAIN=config.INSTITUTION_EMAIL_DOMAIN,
    LEADERBOARD_API_LIMIT=config.LEADERBOARD_API_LIMIT,
)


def get_store():
    store = current_app.config.get('STORE')
    if store is None:
        store = MongoStore.from_uri()
        current_app.config['STORE'] = store
    return store


def strict_mode():
    return bool(current_app.config['STRICT_MODE'])


def email_domain():
    return current_app.config['INSTITUTION_EMAIL_DOMAIN']


def owns(entry, user):
    return entry.get('userId') == user['id']


@application.context_processor
def inject_user():
    return {'current_user': session.get('user'), 'strict_mode': strict_mode()}


# ------------------------------------------------------------
# Accounts
# ------------------------------------------------------------
@application.route("/register", methods=['GET', 'POST'])
def register():
    if request.method == 'GET':
        return render_template("auth.html", is_login=False, errors={}, values={})

    result = validate_registration(request.form, strict=strict_mode(), domain=email_domain())
    if not result.ok:
        return render_template("auth.html", is_login=False, errors=result.errors, values=request.form)

    account = result.entry
    store = get_store()
    try:
        if store.find_user_by_email(account['email']):
            return render_template("auth.html", is_login=False,
                                   errors={'email': 'Email already registered.'}, values=request.form)
        store.insert_user(new_user_document(account, hash_password(account['password'])))
    except Exception:
        application.logger.exception("Register error")
        flash('Error registering user.', 'error')
        return redirect(url_for('register'))

    flash('Registration successful! Please log in.', 'success')
    return redirect(url_for('login'))


@application.route("/login", methods=['GET', 'POST'])
def login():
    if request.method == 'GET':
        return render_template("auth.html", is_login=True, errors={}, values={})

    result = validate_login(request.form, strict=strict_mode(), domain=email_domain())
    if not result.ok:
        return render_template("auth.html", is_login=True, errors=result.errors, values=request.form)

    try:
        user = get_store().find_user_by_email(result.entry['email'])
        if not user:
            return render_template("auth.html", is_login=True,
                                   errors={'email': 'No account found with that email.'}, values=request.form)
        if not verify_password(result.entry['password'], user.get('password')):
            return render_template("auth.html", is_login=True,
                                   errors={'password': 'Incorrect password.'}, values=request.form)
    except Exception:
        application.logger.exception("Login error")
        flash('Login failed. Please try again later.', 'error')
        return redirect(url_for('login'))

    session['user'] = session_user(user)
    flash(f"Welcome {user.get('name')}!", 'success')
    return redirect(url_for('dashboard'))


@application.route("/logout")
def logout():
    session.clear()
    return redirect(url_for('login'))


# ------------------------------------------------------------
# Trash entries
# ------------------------------------------------------------
@application.route("/")
@login_required
def dashboard(user):
    store = get_store()
    try:
        if not store.get_user(user['id']):
            session.pop('user', None)
            return redirect(url_for('login'))
        entries = store.list_entries_for_user(user['id'])
    except Exception:
        application.logger.exception("Dashboard error")
        flash('Error loading your entries.', 'error')
        entries = []
    return render_template("dashboard.html", entries=entries, total=total_quantity(entries))


@application.route("/add", methods=['GET', 'POST'])
@login_required
def add_entry(user):
    if request.method == 'GET':
        return render_template("add.html", errors={}, values={})

    store = get_store()
    try:
        result = validate_entry(request.form, store.exists_by_collector, strict=strict_mode())
        if not result.ok:
            return render_template("add.html", errors=result.errors, values=request.form)
        store.insert_entry(new_trash_document(result.entry, user))
    except Exception:
        application.logger.exception("Add error")
        flash('Error saving trash entry.', 'error')
        return redirect(url_for('add_entry'))

    flash('Trash entry added successfully!', 'success')
    return redirect(url_for('leaderboard'))


@application.route("/edit/<entry_id>", methods=['GET', 'POST'])
@login_required
def edit_entry(entry_id, user):
    store = get_store()
    try:
        entry = store.get_entry(entry_id)
        if not entry:
            return redirect(url_for('dashboard'))
        if not owns(entry, user):
            flash('You can only modify your own entries.', 'error')
            return redirect(url_for('dashboard'))
        if request.method == 'GET':
            return render_template("edit.html", entry=entry, errors={}, values={})

        result = validate_entry_update(request.form, strict=strict_mode())
        if not result.ok:
            return render_template("edit.html", entry=entry, errors=result.errors, values=request.form)
        store.update_entry(entry_id, result.entry)
    except Exception:
        application.logger.exception("Update error")
        flash('Error updating entry.', 'error')
        return redirect(url_for('dashboard'))

    flash('Trash entry updated!', 'success')
    return redirect(url_for('dashboard'))


@application.route("/delete/<entry_id>", methods=['POST'])
@login_required
def delete_entry(entry_id, user):
    store = get_store()
    try:
        entry = store.get_entry(entry_id)
        if not entry:
            flash('Entry not found.', 'error')
        elif not owns(entry, user):
            flash('You can only modify your own entries.', 'error')
        else:
            store.delete_entry(entry_id)
            flash('Entry deleted successfully!', 'success')
    except Exception:
        application.logger.exception("Delete error")
        flash('Error deleting entry.', 'error')
    return redirect(url_for('dashboard'))


@application.route("/check-collector")
@login_required
def check_collector(user):
    name = request.args.get('name', '').strip()
    try:
        exists = bool(name) and get_store().exists_by_collector(name)
    except Exception:
        application.logger.exception("Collector check error")
        return jsonify({'error': 'Could not check collector name'}), 500
    return jsonify({'exists': exists})


@application.route("/validation-rules")
def validation_rules():
    return jsonify(client_rules(strict=strict_mode()))


# ------------------------------------------------------------
# Leaderboard
# ------------------------------------------------------------
@application.route("/leaderboard", methods=["GET"])
@login_required
def leaderboard(user):
    dept_filter = request.args.get('dept') or ALL_DEPARTMENTS
    try:
        board = compute_leaderboard(get_store().list_all_entries(), dept_filter)
    except Exception:
        application.logger.exception("Leaderboard error")
        flash('Error loading leaderboard.', 'error')
        return redirect(url_for('dashboard'))
    return render_template("leaderboard.html", sorted=board['ranked'],
                           departments=board['departments'], dept_filter=dept_filter)


@application.route("/api/leaderboard", methods=["GET"])
@login_required
def api_leaderboard(user):
    dept_filter = request.args.get('dept') or ALL_DEPARTMENTS
    limit = request.args.get('limit', current_app.config['LEADERBOARD_API_LIMIT'], type=int)
    try:
        board = compute_leaderboard(get_store().list_all_entries(), dept_filter)
    except Exception:
        application.logger.exception("Leaderboard error")
        return jsonify({'error': 'Error loading leaderboard.'}), 500
    ranked = board['ranked'][:limit] if limit and limit > 0 else board['ranked']
    return jsonify({'department': dept_filter, 'ranked': ranked, 'departments': board['departments']})


@application.errorhandler(404)
def page_not_found(e):
    return render_template("404.html"), 404


if __name__ == "__main__":
    store = MongoStore.from_uri()
    store.ping()
    application.config['STORE'] = store
    application.run(port=config.PORT)
