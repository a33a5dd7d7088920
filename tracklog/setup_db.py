"""
Database setup script.

Creates the tables, stores the default settings and creates the first
administrator. Safe to run again: existing settings and users are kept.

    python -m tracklog.setup_db --login admin --password 'S3cure-passw0rd'
"""

import argparse
import asyncio
import sys
from sqlalchemy import func, select
from tracklog.app.core.config import settings
from tracklog.app.core.exceptions import AppException
from tracklog.app.db.session import AsyncSessionLocal, Base, engine
from tracklog.app.schemas.config import AppConfig
from tracklog.app.services.config_service import load_config, save_config
from tracklog.app.services.users import create_user, get_user_by_login

# Import models to ensure they are registered with Base
from tracklog.app.models.config_entry import ConfigEntry, Layer
from tracklog.app.models.position import Position
from tracklog.app.models.track import Track
from tracklog.app.models.user import User


async def setup_db(login: str, password: str) -> int:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Tables created")

    async with AsyncSessionLocal() as db:
        stored = (await db.execute(select(func.count()).select_from(ConfigEntry))).scalar()
        if stored:
            config = await load_config(db)
            print("Settings already present, keeping them")
        else:
            config = await save_config(db, AppConfig())
            print("Default settings stored")

        if await get_user_by_login(db, login) is not None:
            print(f"User {login} already exists, skipping")
            return 0
        if not password:
            print("No admin password given (--password or ADMIN_PASSWORD)", file=sys.stderr)
            return 1
        try:
            user = await create_user(db, login, password, True, config)
        except AppException as e:
            print(f"Creating admin failed: {e.message}", file=sys.stderr)
            return 1
        print(f"Created admin {user.login} (id {user.id})")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create tables, default settings and the first admin")
    parser.add_argument("--login", default=settings.admin_login, help="admin login (default: %(default)s)")
    parser.add_argument("--password", default=settings.admin_password, help="admin password")
    args = parser.parse_args(argv)

    async def run():
        try:
            return await setup_db(args.login, args.password)
        finally:
            await engine.dispose()

    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())
