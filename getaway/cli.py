import click

from getaway.extensions import db
from getaway.models import Destination
from getaway.models.enums import DestinationStatus
from getaway.services import FeatureService

STARTER_DESTINATIONS = [
    {"name": "Bali", "slug": "bali", "country": "Indonesia"},
    {"name": "Goa", "slug": "goa", "country": "India"},
    {"name": "Kerala Backwaters", "slug": "kerala-backwaters", "country": "India"},
    {"name": "Ladakh", "slug": "ladakh", "country": "India"},
    {"name": "Swiss Alps", "slug": "swiss-alps", "country": "Switzerland"},
]


def seed_destinations(session, rows=None):
    created = 0
    for row in rows or STARTER_DESTINATIONS:
        if session.query(Destination).filter_by(slug=row["slug"]).first():
            continue
        session.add(Destination(status=DestinationStatus.PUBLISHED, **row))
        created += 1
    session.commit()
    return created


def register_cli(app):
    @app.cli.command("seed-destinations")
    def seed_destinations_command():
        """Insert the starter set of published destinations."""
        db.create_all()
        created = seed_destinations(db.session)
        click.echo(f"Seeded {created} destination(s).")

    @app.cli.group("feature")
    def feature_group():
        """Toggle admin feature switches such as pay_now."""

    @feature_group.command("set")
    @click.argument("name")
    @click.option("--enabled/--disabled", default=True)
    @click.option("--reason", default=None, help="Shown to users while the feature is disabled.")
    @click.option("--by", "changed_by", default=None, help="Operator making the change.")
    def feature_set(name, enabled, reason, changed_by):
        control = FeatureService(db.session, app.logger).set_status(name, enabled, reason, changed_by)
        state = "enabled" if control.is_enabled else "disabled"
        click.echo(f"{control.feature_name} is now {state}.")
