"""Provision a tenant from the command line.

Runs the same pipeline as POST /api/v1/tenants/{id}/provision and prints
each step outcome.

Usage:
    python -m scripts.provision_tenant 5 [--actor ops-user]

Requires: PRIMARY_DATABASE_URL, SECRET_KEY and the BRANCH_PROVIDER_* settings.
Exit code is 0 when the tenant ended up mapped and active, 1 otherwise.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from scripts._common import script_services


async def main(tenant_id: int, actor: str | None) -> int:
    async with script_services() as services:
        result = await services.provisioning.provision(tenant_id, actor_id=actor)
    for step in result.steps:
        state = "skipped" if step.skipped else ("ok" if step.ok else "FAILED")
        line = f"  {step.step.value:<18} {state}"
        if step.error:
            line += f"  ({step.error})"
        print(line)
    for failure in result.seed_failures:
        print(f"  seed failure: {failure.item}: {failure.error}", file=sys.stderr)
    if not result.ok:
        print(
            f"Tenant {tenant_id} not provisioned: {result.failed_step.value if result.failed_step else ''} {result.error or ''}",
            file=sys.stderr,
        )
        return 1
    print(f"Tenant {tenant_id} -> {result.endpoint}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("tenant_id", type=int)
    parser.add_argument("--actor", default=None, help="Recorded as branch_mapping.updated_by")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.tenant_id, args.actor)))
