"""
資料庫遷移與初始名單

在服務接受流量之前執行一次：
- alembic upgrade head
- 寫入設定中的初始值日生（已存在的略過）

執行方式：
    python -m dishduty.scripts.migrate
    python -m dishduty.scripts.migrate --skip-seed
"""
import argparse
import logging

from dishduty.config import get_settings
from dishduty.database import SessionLocal, run_migrations
from dishduty.services.worker_service import WorkerService

log = logging.getLogger(__name__)


def seed_workers(names: list[str]) -> int:
    """寫入初始名單，回傳新建立的人數"""
    db = SessionLocal()
    try:
        created = WorkerService(db).seed_roster(names)
        for worker in created:
            log.info("Worker %r seeded successfully.", worker.name)
        return len(created)
    finally:
        db.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run database migrations and seed the roster.")
    parser.add_argument("--revision", default="head", help="Target Alembic revision (default: head)")
    parser.add_argument("--skip-seed", action="store_true", help="Do not seed the initial roster")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    run_migrations(revision=args.revision)
    log.info("Migrations complete")

    if not args.skip_seed:
        count = seed_workers(settings.seed_workers)
        log.info("Seeded %d new workers", count)


if __name__ == "__main__":
    main()
