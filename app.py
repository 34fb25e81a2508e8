import logging

from flask import Flask
from config import Config
from routes import (
    health_bp,
    clients_bp,
    bookings_bp,
    blocks_bp,
    dashboard_bp,
    calendar_bp,
    data_bp,
)

from models import db
from flask_migrate import Migrate
from security.csrf import csrf_protect


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    if not app.debug and not app.testing:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(clients_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(blocks_bp)
    app.register_blueprint(calendar_bp)
    app.register_blueprint(data_bp)

    # Database init
    db.init_app(app)

    # Migrations (flask db upgrade); no seeding here, see `flask seed-demo`
    Migrate(app, db, render_as_batch=True)

    @app.before_request
    def _csrf_protect():
        failure = csrf_protect()
        if failure:
            return failure

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp


    register_cli(app)


    return app

#-------------------------
import click
from utils.seed import seed_demo_data

def register_cli(app):
    @app.cli.command("seed-demo")
    @click.option("--seed", type=int, default=None, help="Random seed (defaults to DEMO_SEED).")
    def seed_demo(seed):
        """Fill an empty database with demo clients and bookings."""
        if seed is None:
            seed = app.config.get("DEMO_SEED", 42)

        counts = seed_demo_data(seed)
        if counts is None:
            click.echo("Database is not empty; nothing seeded")
            return

        click.echo(
            f"Seeded {counts['clients']} clients, {counts['bookings']} bookings, "
            f"{counts['blocks']} blocks (seed={seed})"
        )

    @app.cli.command("create-db")
    def create_db():
        """Create tables directly (development shortcut for `flask db upgrade`)."""
        db.create_all()
        click.echo("Tables created")

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
