from flask import Flask, jsonify
from configs import db, login, Config, configure_logging

from db.models import User, UserRole
from blueprint import blue_print
from admin.setup import init_admin

# user identity is asserted by the upstream identity service
USER_HEADER = "X-User-Id"


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app.config.get("LOG_LEVEL"))

    db.init_app(app)
    login.init_app(app)

    @app.context_processor
    def inject_enums():
        return dict(UserRole=UserRole)

    @login.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login.request_loader
    def load_user_from_request(req):
        raw = req.headers.get(USER_HEADER, "")
        if not raw.isdigit():
            return None
        user = db.session.get(User, int(raw))
        if user is None or not user.is_active:
            return None
        return user

    @login.unauthorized_handler
    def unauthorized():
        return (
            jsonify(
                {
                    "error": "unauthorized",
                    "message": f"Missing or unknown {USER_HEADER} header.",
                    "field": None,
                }
            ),
            401,
        )

    @app.cli.command("init-db")
    def init_db():
        """Create all tables (fresh databases without alembic history)."""
        db.create_all()
        print("✓ Tables created")

    if app.config.get("ADMIN_ENABLED"):
        init_admin(app)  # /manage
    blue_print(app)
    return app


if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5000)
