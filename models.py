# models.py
# MongoDB document shapes for the campus trash tracker, plus the helpers that
# build the documents we actually write.

from datetime import datetime, timezone

user_schema = {
    'name': 'str',  # User's full name
    'email': 'str',  # Lowercased email address (unique)
    'password': 'str',  # werkzeug password hash
    'department': 'str',  # Department used to filter the leaderboard
    'createdAt': 'str',  # ISO-8601 UTC timestamp of registration
}

trash_entry_schema = {
    'type': 'str',  # Kind of trash, letters and spaces only
    'quantity': 0,  # Positive number collected
    'location': 'str',  # Where it was collected (3+ characters)
    'date': 'str',  # Collection date (YYYY-MM-DD)
    'collector': 'str',  # Person credited, unique when the entry is created
    'department': 'str',  # Copied from the submitting user
    'userId': 'str',  # Owner (string form of the user's _id)
    'createdAt': 'str',  # ISO-8601 UTC timestamp, never changes
}

# Note: MongoDB is schemaless; the dicts above document what the app stores.


def new_user_document(account, password_hash):
    return {
        'name': account['name'],
        'email': account['email'],
        'password': password_hash,
        'department': account['department'],
        'createdAt': datetime.now(timezone.utc).isoformat(),
    }


def new_trash_document(entry, user):
    """Combine a validated entry with its owner's id and department."""
    return {
        'type': entry['type'],
        'quantity': entry['quantity'],
        'location': entry['location'],
        'date': entry['date'],
        'collector': entry['collector'],
        'department': user.get('department'),
        'userId': user['id'],
        'createdAt': entry['createdAt'],
    }


def session_user(user):
    """The subset of a user record kept in the session cookie."""
    return {
        'id': str(user['id']),
        'name': user.get('name'),
        'email': user.get('email'),
        'department': user.get('department'),
    }
