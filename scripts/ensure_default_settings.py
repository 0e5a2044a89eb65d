"""Backfill default settings for one or more tenants.

Inserts missing catalog keys and display metadata on each tenant's current
dataset. Tenant 0 gets the canonical defaults; other tenants inherit tenant
0's values for non-strict keys.

Usage:
    python -m scripts.ensure_default_settings [tenant_id ...]

Default: tenant 0 only.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from app.core.constants import PRIMARY_TENANT_ID
from app.infrastructure.persistence.schema import PRIMARY_FULL, SET_PRIMARY_FULL
from scripts._common import script_services


async def main(tenant_ids: list[int]) -> int:
    async with script_services() as services:
        await services.schema_engine.ensure(
            services.registry.primary, PRIMARY_FULL, set_name=SET_PRIMARY_FULL
        )
        for tenant_id in tenant_ids:
            written = await services.settings_service.ensure_defaults(tenant_id)
            print(f"Tenant {tenant_id}: {len(written)} setting(s) written")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("tenant_ids", type=int, nargs="*", default=[PRIMARY_TENANT_ID])
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.tenant_ids)))
