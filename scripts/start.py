#!/usr/bin/env python3
"""
Container entrypoint for the invoice dashboard.

    python scripts/start.py                 # migrate, seed admin, serve
    python scripts/start.py --release-only  # migrate + seed, then exit
    python scripts/start.py --skip-release  # serve only

Environment: DATABASE_URL (required), PORT (default 8080),
WEB_CONCURRENCY (gunicorn workers, default 2), plus the ADMIN_* seed
variables read by scripts/init_db.py.
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.dashboard.config import load_settings  # noqa: E402
from scripts import init_db  # noqa: E402


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = (os.environ.get(name) or "").strip() or str(default)
    try:
        value = int(raw)
    except ValueError:
        value = -1
    if not lo <= value <= hi:
        raise SystemExit(f"ERROR: {name}={raw!r} must be an integer {lo}-{hi}.")
    return value


def release() -> None:
    """Bring the schema to head and make sure the admin user exists."""
    if not (os.environ.get("DATABASE_URL") or "").strip():
        raise RuntimeError("DATABASE_URL is required to run migrations.")

    settings = load_settings()  # postgres:// URLs come back as postgresql+psycopg://
    if settings.env in ("prod", "production") and settings.database_url.startswith("sqlite"):
        raise RuntimeError("Refusing to migrate a sqlite database in production.")

    from alembic import command
    from alembic.config import Config

    print(f"Migrating invoice dashboard schema (ENV={settings.env})...", flush=True)
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(cfg, "head")

    init_db.seed_only(database_url=settings.database_url)


def serve() -> None:
    port = _env_int("PORT", 8080, lo=1, hi=65535)
    workers = _env_int("WEB_CONCURRENCY", 2, lo=1, hi=64)
    print(f"Serving app.wsgi:app on 0.0.0.0:{port} with {workers} worker(s)", flush=True)

    # exec so gunicorn receives container signals directly.
    os.execvp(
        "gunicorn",
        [
            "gunicorn",
            "app.wsgi:app",
            "--bind", f"0.0.0.0:{port}",
            "--workers", str(workers),
            "--timeout", "60",
            "--preload",
            "--access-logfile", "-",
            "--error-logfile", "-",
        ],
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Migrate, seed and serve the invoice dashboard.")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--release-only", action="store_true", help="run migrations and seed, then exit")
    group.add_argument("--skip-release", action="store_true", help="start gunicorn without migrating")
    args = parser.parse_args()

    if not args.skip_release:
        try:
            release()
        except Exception as e:
            print(f"Release failed: {e}", flush=True)
            sys.exit(1)
    if not args.release_only:
        serve()


if __name__ == "__main__":
    main()
