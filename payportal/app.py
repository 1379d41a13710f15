"""
Payments Portal API — Flask application
Users submit cross-border payment requests; admins approve or reject them.
"""

import logging
from datetime import datetime, timezone
from flask import Flask, jsonify
from flasgger import Swagger
from payportal.extensions import db, jwt, BLOCKLIST
from payportal.config import load_config
from payportal import models  # noqa: F401  register models before create_all


def configure_logging(level):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def register_jwt_handlers():
    @jwt.token_in_blocklist_loader
    def check_if_token_in_blocklist(jwt_header, jwt_payload):
        return jwt_payload['jti'] in BLOCKLIST

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'error': reason}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'error': f'Invalid token: {reason}'}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({'error': 'Token has expired'}), 401

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return jsonify({'error': 'Token has been revoked'}), 401


def create_app(config=None):
    app = Flask(__name__)

    app.config.update(load_config())
    if config:
        app.config.update(config)

    configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize Extensions
    db.init_app(app)
    jwt.init_app(app)
    register_jwt_handlers()

    Swagger(app, template={
        "info": {"title": "Payments Portal API", "version": "1.0.0"},
        "securityDefinitions": {
            "Bearer": {"type": "apiKey", "name": "Authorization", "in": "header"}
        },
    })

    # Register Blueprints
    from payportal.routes.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')

    from payportal.routes.payments import payments_bp
    app.register_blueprint(payments_bp, url_prefix='/payments')

    from payportal.routes.users import users_bp
    app.register_blueprint(users_bp, url_prefix='/users')

    from payportal.routes.admin import admin_bp
    app.register_blueprint(admin_bp, url_prefix='/admin')

    from payportal.cli import create_admin_command
    app.cli.add_command(create_admin_command)

    with app.app_context():
        db.create_all()

    @app.route('/health')
    def health():
        try:
            db.session.execute(db.text('SELECT 1'))
            return jsonify({
                "service": "payportal",
                "status": "healthy",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }), 200
        except Exception as e:
            return jsonify({"service": "payportal", "status": "unhealthy", "error": str(e)}), 503

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5000)
