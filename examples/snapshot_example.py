"""
Example script demonstrating snapshot export and import in BudgetVault.

This script shows how to:
1. Export all of a user's data
2. Check a snapshot with a dry run
3. Restore it with each import mode

Set BUDGETVAULT_TOKEN to a bearer token for the user, for example one
printed by ``scripts/snapshot_admin.py token USER_ID``.
"""

import asyncio
import json
import os
from pathlib import Path

import httpx


class SnapshotExample:
    def __init__(self, base_url: str = "http://localhost:8000", token: str = ""):
        self.base_url = base_url
        self.client = httpx.AsyncClient(headers={"Authorization": f"Bearer {token}"})

    async def close(self):
        await self.client.aclose()

    async def export_data(self) -> dict:
        """Download the current user's snapshot."""
        response = await self.client.get(f"{self.base_url}/api/v1/data/export")
        response.raise_for_status()
        return response.json()

    async def import_data(self, snapshot: dict, mode: str, dry_run: bool = False) -> dict:
        """Send a snapshot back as a JSON body."""
        response = await self.client.post(
            f"{self.base_url}/api/v1/data/import",
            json={"data": snapshot, "options": {"mode": mode, "dryRun": dry_run}},
        )
        response.raise_for_status()
        return response.json()

    async def upload_file(self, path: Path, mode: str) -> dict:
        """Upload a snapshot file."""
        with open(path, "rb") as f:
            response = await self.client.post(
                f"{self.base_url}/api/v1/data/import/file",
                params={"mode": mode},
                files={"file": (path.name, f, "application/json")},
            )
        response.raise_for_status()
        return response.json()


def print_result(result: dict):
    status = "✓" if result["success"] else "⚠"
    print(f"{status} {result['message']}")
    for entity, count in result["imported"].items():
        print(f"  - {entity}: {count}")
    for error in result["errors"]:
        print(f"  ❌ {error}")
    for warning in result["warnings"]:
        print(f"  ⚠ {warning}")


async def run_snapshot_examples():
    """Run the snapshot walkthrough."""
    example = SnapshotExample(
        base_url=os.environ.get("BUDGETVAULT_URL", "http://localhost:8000"),
        token=os.environ["BUDGETVAULT_TOKEN"],
    )

    try:
        # 1. Export
        print("\n1. EXPORT")
        snapshot = await example.export_data()
        metadata = snapshot["metadata"]
        print(f"✓ Exported snapshot version {snapshot['version']}")
        print(f"  - Templates: {metadata['total_templates']}")
        print(f"  - Budgets: {metadata['total_budgets']}")
        print(f"  - Transactions: {metadata['total_transactions']}")
        print(f"  - Savings goals: {metadata['total_savings_goals']}")

        backup = Path("budget-backup.json")
        backup.write_text(json.dumps(snapshot, indent=2))
        print(f"✓ Saved to {backup}")

        # 2. Dry run
        print("\n2. DRY RUN")
        print_result(await example.import_data(snapshot, mode="replace", dry_run=True))

        # 3. Append a copy; every record gets a new id
        print("\n3. APPEND")
        print_result(await example.import_data(snapshot, mode="append"))

        # 4. Restore the backup, discarding the appended copy
        print("\n4. REPLACE FROM FILE")
        print_result(await example.upload_file(backup, mode="replace"))

    except httpx.HTTPStatusError as e:
        print(f"❌ Error: {e.response.status_code} - {e.response.text}")
    finally:
        await example.close()


def main():
    """Main entry point."""
    print("=" * 60)
    print("BudgetVault Snapshot Example")
    print("=" * 60)

    asyncio.run(run_snapshot_examples())

    print("\n" + "=" * 60)
    print("Example completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
