"""
Charge un jeu de données de démonstration (personnes et affectations).

Les écritures passent par le registre et le workflow, donc par les mêmes règles que l'API: une
base déjà peuplée fait échouer les entrées en double sans rien modifier.

Usage:
    python -m scripts.seed_people --database-url sqlite:///./stargate.db
"""

from __future__ import annotations

import argparse
from datetime import date

from stargate.core.container import Container
from stargate.core.settings import Settings
from stargate.domain.entities import CreateDutyCommand
from stargate.domain.errors import StargateError

DEMO_PEOPLE = ["John Doe", "Jane Doe"]
DEMO_DUTIES = [
    CreateDutyCommand(
        name="John Doe", rank="1LT", duty_title="Commander", duty_start_date=date(2024, 6, 12)
    ),
]


def seed(container: Container) -> dict[str, int]:
    """Enregistre les personnes et affectations de démonstration.

    Retour: compteurs `created` / `skipped` (entrées déjà présentes ou refusées).
    """
    stats = {"created": 0, "skipped": 0}
    for name in DEMO_PEOPLE:
        try:
            container.registry.register(name)
            stats["created"] += 1
        except StargateError:
            stats["skipped"] += 1
    for command in DEMO_DUTIES:
        try:
            container.workflow.create_duty(command)
            stats["created"] += 1
        except StargateError:
            stats["skipped"] += 1
    return stats


def main(argv: list[str] | None = None) -> dict[str, int]:
    """Point d'entrée: crée le schéma si besoin puis charge les données."""
    parser = argparse.ArgumentParser(description="Seed demo people and duties")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy URL (défaut: env)")
    args = parser.parse_args(argv)

    settings = Settings()
    if args.database_url:
        settings.DATABASE_URL = args.database_url
    container = Container(settings)
    try:
        container.init_schema()
        stats = seed(container)
    finally:
        container.dispose()
    print(f"seed created={stats['created']} skipped={stats['skipped']}")
    return stats


if __name__ == "__main__":  # pragma: no cover - script entry
    main()
