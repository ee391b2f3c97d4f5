"""Reset the database to a known demo state.

Run from the project root: ``python tools/seed.py`` (SECRET_KEY and
DATABASE_URL are read from the environment like the server does).
"""
import logging
import sys
from pathlib import Path

# ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from app.config import load_settings  # noqa: E402
from app.database import init_schema, make_engine, make_session_factory  # noqa: E402
from app.models.task import Task  # noqa: E402
from app.models.user import Role, User  # noqa: E402
from app.stores import TaskStore, UserStore  # noqa: E402
from app.utils.auth import PasswordHasher  # noqa: E402

logger = logging.getLogger("taskgate.seed")

ADMIN = {"name": "Admin", "email": "admin@example.com", "password": "admin123"}
USER = {"name": "Test User", "email": "user@test.com", "password": "123456"}

ADMIN_TASKS = [
    ("Admin Task 1", "Review project submissions"),
    ("Admin Task 2", "Analyze team performance"),
]
USER_TASKS = [
    ("User Task 1", "Complete assignment"),
    ("User Task 2", "Prepare for meeting"),
    ("User Task 3", "Read documentation"),
]


def seed(session_factory, hasher: PasswordHasher) -> dict:
    """Wipe users and tasks, then create one admin, one user and their tasks.

    Returns the created users keyed by role.
    """
    db = session_factory()
    try:
        db.query(Task).delete()
        db.query(User).delete()
        db.commit()

        users = UserStore(db)
        tasks = TaskStore(db)
        admin = users.create(ADMIN["name"], ADMIN["email"], hasher.hash(ADMIN["password"]), role=Role.admin)
        logger.info("admin user created: %s", admin.email)
        user = users.create(USER["name"], USER["email"], hasher.hash(USER["password"]), role=Role.user)
        logger.info("normal user created: %s", user.email)

        for title, description in ADMIN_TASKS:
            tasks.create(title, admin.id, description)
        for title, description in USER_TASKS:
            tasks.create(title, user.id, description)
        logger.info("created %d tasks", len(ADMIN_TASKS) + len(USER_TASKS))
        # reload and detach so callers can read the users after the session closes
        for created in (admin, user):
            db.refresh(created)
            db.expunge(created)
        return {Role.admin: admin, Role.user: user}
    finally:
        db.close()


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s %(message)s")
    settings = load_settings()
    engine = make_engine(settings.database_url)
    init_schema(engine)
    try:
        seed(make_session_factory(engine), PasswordHasher(rounds=settings.bcrypt_rounds))
    except Exception:
        logger.exception("seed failed")
        return 1
    finally:
        engine.dispose()
    logger.info("seeding completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
