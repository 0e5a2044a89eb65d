"""Make a subject a super administrator.

Usage:
    python -m scripts.grant_super_admin <subject_id>
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from app.infrastructure.persistence.repositories import AccessRepository
from scripts._common import script_services


async def main(subject_id: str) -> int:
    async with script_services() as services:
        async with services.registry.primary.transaction() as session:
            created = await AccessRepository(session).add_super_admin(subject_id)
    print(f"{subject_id}: {'granted' if created else 'already a super admin'}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("subject_id")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.subject_id)))
