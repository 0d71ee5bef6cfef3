from .health_routes import health_bp
from .auth_routes import auth_bp
from .cafe_routes import cafe_bp
from .notification_routes import notification_bp


def register_routes(app):
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(cafe_bp)
    app.register_blueprint(notification_bp)
