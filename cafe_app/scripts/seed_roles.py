import logging

from cafe_app.extensions import db
from cafe_app.models.role import Role

logger = logging.getLogger(__name__)

# Define the required roles for the application
REQUIRED_ROLES = [
    {"name": "ADMIN", "description": "Administrator with full access"},
    {"name": "CAFE", "description": "Cafe staff: posts menus and breaks ties"},
    {"name": "USER", "description": "Regular employee who votes"},
]


def seed_roles():
    """Create missing roles in the database.

    Run after migrations, either as ``flask cafe seed-roles`` or
    ``python -m cafe_app.scripts.seed_roles``. Existing roles are left alone.
    """
    added = 0
    for role_data in REQUIRED_ROLES:
        role = Role.query.filter_by(name=role_data["name"]).first()
        if not role:
            role = Role(name=role_data["name"], description=role_data.get("description"))
            db.session.add(role)
            logger.info("Added role: %s", role.name)
            added += 1
    db.session.commit()
    return added


if __name__ == "__main__":
    # When run as a script, ensure the Flask app context is available.
    from cafe_app import create_app
    app = create_app()
    with app.app_context():
        seed_roles()
