from __future__ import annotations

import logging

from dotenv import load_dotenv

from duty_roster.container import build_container, load_settings
from duty_roster.core.logging_config import setup_logging
from duty_roster.database.bootstrap import ensure_demo_duties, ensure_demo_users

logger = logging.getLogger("seed_db")


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()
    setup_logging("INFO")

    container = build_container(settings)
    users = ensure_demo_users(container.users_repo)
    duties = ensure_demo_duties(container.duties_repo)

    logger.info(
        "OK: Seeded Firestore (project=%s): %d users, %d duties",
        getattr(settings, "FIREBASE_PROJECT_ID", None) or "<from credentials>",
        users,
        duties,
    )


if __name__ == "__main__":
    main()
