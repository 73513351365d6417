#!/usr/bin/env python3
"""
Export and import user snapshots from the shell.

Usage:
    snapshot_admin.py export USER_ID [-o FILE]
    snapshot_admin.py import USER_ID FILE [--mode replace|merge|append] [--dry-run]
    snapshot_admin.py token USER_ID
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from budgetvault.core.database import AsyncSessionLocal, close_database
from budgetvault.core.db_init import init_db
from budgetvault.core.exceptions import SnapshotError
from budgetvault.core.logging import get_logger, setup_logging
from budgetvault.core.security import create_access_token
from budgetvault.schemas.data_transfer import ImportMode
from budgetvault.services.data_transfer import DataTransferService
from budgetvault.services.store import EntityStore

logger = get_logger(__name__)


def _service() -> DataTransferService:
    return DataTransferService(EntityStore(AsyncSessionLocal))


async def export_command(args: argparse.Namespace) -> int:
    snapshot = await _service().export_user_data(args.user_id)
    content = snapshot.model_dump_json(indent=2)

    if args.output:
        Path(args.output).write_text(content)
        print(f"✅ Exported {snapshot.metadata.total_budgets} budgets to {args.output}")
    else:
        print(content)
    return 0


async def import_command(args: argparse.Namespace) -> int:
    try:
        document = json.loads(Path(args.file).read_text())
    except (OSError, json.JSONDecodeError) as e:
        print(f"❌ Cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    # Imported data always belongs to the target user
    if isinstance(document, dict):
        document["user_id"] = args.user_id

    result = await _service().import_user_data(
        args.user_id,
        document,
        mode=ImportMode(args.mode),
        dry_run=args.dry_run,
    )

    print(f"{'✅' if result.success else '⚠️'} {result.message}")
    for entity, count in result.imported.model_dump().items():
        print(f"  - {entity}: {count}")
    for error in result.errors:
        print(f"  ❌ {error}")
    for warning in result.warnings:
        print(f"  ⚠️  {warning}")
    return 0 if result.success else 2


async def token_command(args: argparse.Namespace) -> int:
    print(create_access_token(args.user_id))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BudgetVault snapshot administration")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export a user's data")
    export_parser.add_argument("user_id")
    export_parser.add_argument("-o", "--output", help="Write to FILE instead of stdout")
    export_parser.set_defaults(handler=export_command)

    import_parser = subparsers.add_parser("import", help="Import a snapshot file for a user")
    import_parser.add_argument("user_id")
    import_parser.add_argument("file")
    import_parser.add_argument(
        "--mode",
        choices=[mode.value for mode in ImportMode],
        default=ImportMode.REPLACE.value,
    )
    import_parser.add_argument("--dry-run", action="store_true")
    import_parser.set_defaults(handler=import_command)

    token_parser = subparsers.add_parser("token", help="Issue an access token for a user")
    token_parser.add_argument("user_id")
    token_parser.set_defaults(handler=token_command)

    return parser


async def run(args: argparse.Namespace) -> int:
    await init_db()
    try:
        return await args.handler(args)
    except SnapshotError as e:
        logger.error("snapshot_command_failed", command=args.command, error=str(e))
        print(f"❌ {e}", file=sys.stderr)
        return 1
    finally:
        await close_database()


def main() -> None:
    setup_logging()
    args = build_parser().parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
