import click
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from config import config

db = SQLAlchemy()


def create_app(config_name='default'):
    """Application factory — creates and configures the Flask app."""
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # ── Logging ───────────────────────────────────────────────────
    from shopcore.utils.logging import setup_logging
    setup_logging(app)

    # ── Extensions ────────────────────────────────────────────────
    db.init_app(app)

    from shopcore.notifications.queue import QueueRegistry
    app.extensions['notifications'] = QueueRegistry(ttl=app.config['NOTIFICATION_TTL_SECONDS'])

    # ── Blueprints ────────────────────────────────────────────────
    from shopcore.main import main as main_blueprint
    app.register_blueprint(main_blueprint)

    from shopcore.catalog import catalog as catalog_blueprint
    app.register_blueprint(catalog_blueprint, url_prefix='/catalog')

    from shopcore.storefront import storefront as storefront_blueprint
    app.register_blueprint(storefront_blueprint)

    from shopcore.cashier import cashier as cashier_blueprint
    app.register_blueprint(cashier_blueprint, url_prefix='/pos')

    # ── Error Handlers ────────────────────────────────────────────
    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({'error': getattr(e, 'description', 'Bad request')}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': getattr(e, 'description', 'Not found')}), 404

    @app.errorhandler(500)
    def internal_error(e):
        app.logger.error(f"Unhandled server error: {e}")
        return jsonify({'error': 'Server error'}), 500

    # ── CLI Commands ──────────────────────────────────────────────
    register_commands(app)

    return app


def register_commands(app):
    """Register custom Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db():
        """Create all catalog tables."""
        db.create_all()
        click.echo('✅  Database tables created.')

    @app.cli.command('seed-demo')
    def seed_demo():
        """Populate the catalog with demo products and variants."""
        from shopcore.catalog.seed import seed_catalog

        click.echo("🌱 Seeding demo catalog...")
        db.create_all()
        created = seed_catalog()
        if created:
            click.echo(f"✅ {created} products seeded.")
        else:
            click.echo("ℹ️   Catalog already populated, nothing to do.")
