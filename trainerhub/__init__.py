"""
TrainerHub Subscriptions API Application Factory.
"""
import importlib
import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_restx import Api
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import text

# Initialize extensions
db = SQLAlchemy()
jwt = JWTManager()
migrate = Migrate()

CONFIG_MAPPING = {
    'development': ('trainerhub.config.development_config', 'DevelopmentConfig'),
    'testing': ('trainerhub.config.testing_config', 'TestingConfig'),
    'production': ('trainerhub.config.production_config', 'ProductionConfig'),
}


def create_app(config_name=None):
    """
    Application Factory Pattern implementation.

    Args:
        config_name: Configuration name to use (development, testing, production).

    Returns:
        Flask application instance.
    """
    load_dotenv()

    app = Flask(__name__)

    app_config = config_name or os.getenv("FLASK_ENV", "development")
    if app_config not in CONFIG_MAPPING:
        app.logger.warning("Unknown configuration %r, falling back to development", app_config)
        app_config = 'development'

    module_path, class_name = CONFIG_MAPPING[app_config]
    config_module = importlib.import_module(module_path)
    app.config.from_object(getattr(config_module, class_name))
    app.config['CONFIG_NAME'] = app_config
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    app.logger.info("Loaded configuration class: %s", class_name)

    # Initialize extensions with app
    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)

    # Import models to ensure they're registered with SQLAlchemy
    from trainerhub.models import (AuditEntry, Plan, SubscriptionHistoryEntry,  # noqa: F401
                                   User)

    api = Api(
        app,
        version=app.config.get("API_VERSION", "1.0"),
        title=app.config.get("API_TITLE", "TrainerHub Subscriptions API"),
        description=app.config.get("API_DESCRIPTION", "Plan catalog and trainer subscription management"),
        doc="/api/docs",
        authorizations={
            'Bearer Auth': {
                'type': 'apiKey',
                'in': 'header',
                'name': 'Authorization',
                'description': 'Enter: **Bearer &lt;JWT&gt;**'
            },
        },
        security='Bearer Auth'
    )

    from trainerhub.api.plans import plan_ns
    from trainerhub.api.subscriptions import subscription_ns

    api.add_namespace(plan_ns, path='/api/plans')
    api.add_namespace(subscription_ns, path='/api/subscriptions')

    from trainerhub.cli import register_commands
    register_commands(app)

    @app.route('/health')
    def health_check():
        """Health check endpoint to verify the application is running."""
        return jsonify({
            'status': 'healthy',
            'environment': app_config,
            'database_connected': _check_db_connection()
        })

    def _check_db_connection():
        """Check if the database connection is working."""
        try:
            db.session.execute(text('SELECT 1'))
            return True
        except Exception as e:
            app.logger.error("Database connection error: %s", e)
            return False

    @app.shell_context_processor
    def shell_context():
        return {"app": app, "db": db}

    return app
