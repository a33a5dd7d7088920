"""
Import GPX files from the command line.

    python -m tracklog.import_cli --user-id 2 ride1.gpx ride2.gpx

A file is skipped when the user already has a track named after it,
unless --import-existing-track is given.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List
from tracklog.app.core.config import settings
from tracklog.app.core.exceptions import AppException
from tracklog.app.db.session import AsyncSessionLocal, engine
from tracklog.app.services.gpx import import_gpx
from tracklog.app.services.tracks import find_track_by_name
from tracklog.app.services.users import get_user

logger = logging.getLogger("tracklog.import_cli")


async def import_files(user_id: int, files: List[Path], import_existing: bool = False, skip_last: bool = False) -> int:
    """
    Import files in the given order.

    Returns:
        Number of imported tracks

    Raises:
        AppException: Unknown user, unreadable GPX or database failure
    """
    if skip_last:
        files = files[:-1]

    imported = 0
    async with AsyncSessionLocal() as db:
        await get_user(db, user_id)
        for path in files:
            if not import_existing and await find_track_by_name(db, user_id, path.name) is not None:
                print(f"WARNING: {path.name} already present, skipping...")
                continue
            print(f"importing {path}...")
            tracks = await import_gpx(db, user_id, path.read_bytes(), path.name)
            imported += len(tracks)
    return imported


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Import GPX track files for a user")
    parser.add_argument("-u", "--user-id", type=int, default=1, help="user to import the tracks for (default: %(default)s)")
    parser.add_argument("-e", "--import-existing-track", action="store_true",
                        help="import files even if a track with the same name exists")
    parser.add_argument("-l", "--skip-last-track", action="store_true", help="skip the last file")
    parser.add_argument("gpx", nargs="+", type=Path, help="one or more GPX files")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    unreadable = [str(path) for path in args.gpx if not path.is_file()]
    if unreadable:
        parser.error(f"not readable: {', '.join(unreadable)}")

    async def run():
        try:
            return await import_files(args.user_id, args.gpx, args.import_existing_track, args.skip_last_track)
        finally:
            await engine.dispose()

    try:
        count = asyncio.run(run())
    except AppException as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 1
    print(f"Imported {count} track(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
