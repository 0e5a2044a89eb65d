"""Provisioning saga: give a tenant its own database branch.

Steps run in a fixed order and each records a StepOutcome:

    branch-name -> create-branch -> initialize-schema -> seed-content ->
    seed-settings -> persist-mapping -> activate-tenant -> grant-admin

create-branch failing ends the run with nothing persisted. The schema and
seed steps are best-effort: their failures are recorded and the run goes on,
because only the mapping and the activation are needed for the tenant to
work. Without a persisted mapping the tenant is not activated. Nothing is
rolled back. Callers must not provision the same tenant concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from app.application.dtos.provisioning import (
    BranchCreation,
    ProvisionResult,
    StepOutcome,
)
from app.application.interfaces.services import (
    IAccessService,
    IBranchDirectory,
    IBranchProvider,
    IBranchSeeder,
    IConnectionRegistry,
    ISchemaEngine,
    ISchemaStatement,
    ITenantDirectory,
)
from app.core.constants import PRIMARY_TENANT_ID
from app.domain.entities.tenant import TenantEntity
from app.domain.enums import MappingSource, ProvisionStep, TenantStatus
from app.domain.exceptions import (
    ConfigurationError,
    InvalidTenantTransitionException,
    PartialSeedFailure,
    ReservedTenantException,
)
from app.domain.value_objects.core import BranchName
from app.shared.telemetry import add_span_attributes, add_span_event, traced

logger = logging.getLogger(__name__)


class _StepLog:
    """Collects step outcomes for one provisioning run and reports each one."""

    def __init__(self, tenant_id: int) -> None:
        self.tenant_id = tenant_id
        self.steps: list[StepOutcome] = []

    def record(
        self,
        step: ProvisionStep,
        ok: bool,
        *,
        error: str | None = None,
        details: dict[str, Any] | None = None,
        skipped: bool = False,
    ) -> StepOutcome:
        outcome = StepOutcome(step, ok, error=error, skipped=skipped, details=details or {})
        self.steps.append(outcome)
        add_span_event(
            f"provision.{step.value}", {"ok": ok, "skipped": skipped, "error": error}
        )
        if skipped:
            logger.warning("Provision tenant %s: %s skipped", self.tenant_id, step.value)
        elif ok:
            logger.info("Provision tenant %s: %s ok", self.tenant_id, step.value)
        else:
            logger.warning(
                "Provision tenant %s: %s failed: %s", self.tenant_id, step.value, error
            )
        return outcome

    def skip(self, *steps: ProvisionStep) -> None:
        for step in steps:
            self.record(step, False, skipped=True)


class ProvisioningService:
    """Runs the provisioning saga against injected collaborators."""

    def __init__(
        self,
        tenants: ITenantDirectory,
        provider: IBranchProvider,
        registry: IConnectionRegistry,
        directory: IBranchDirectory,
        schema_engine: ISchemaEngine,
        seeder: IBranchSeeder,
        access: IAccessService,
        *,
        baseline: Sequence[ISchemaStatement],
        baseline_set_name: str = "branch-baseline",
        source_database: str = "",
        region: str | None = None,
    ) -> None:
        self.tenants = tenants
        self.provider = provider
        self.registry = registry
        self.directory = directory
        self.schema_engine = schema_engine
        self.seeder = seeder
        self.access = access
        self.baseline = baseline
        self.baseline_set_name = baseline_set_name
        self.source_database = source_database
        self.region = region or None

    @traced("provisioning.provision")
    async def provision(
        self, tenant_id: int, actor_id: str | None = None
    ) -> ProvisionResult:
        """Provision tenant_id and return every step's outcome.

        Raises:
            ReservedTenantException: For tenant 0.
            TenantNotFoundException: If the tenant does not exist.
            InvalidTenantTransitionException: If the tenant is rejected or deleted.
        """
        if tenant_id == PRIMARY_TENANT_ID:
            raise ReservedTenantException("provisioned")
        tenant = await self.tenants.get_tenant(tenant_id)
        entity = TenantEntity(
            id=tenant.id, desired_domain=tenant.desired_domain, status=tenant.status
        )
        if not entity.can_provision():
            raise InvalidTenantTransitionException(
                tenant_id, tenant.status.value, TenantStatus.ACTIVE.value
            )
        add_span_attributes(tenant_id=tenant_id, tenant_status=tenant.status.value)

        log = _StepLog(tenant_id)
        branch_name = BranchName(tenant_id).value
        log.record(ProvisionStep.BRANCH_NAME, True, details={"branch_name": branch_name})

        try:
            created = await self.provider.create_branch(
                self.source_database, branch_name, self.region
            )
        except Exception as exc:
            logger.exception("Provision tenant %s: branch provider raised", tenant_id)
            created = BranchCreation(ok=False, error=str(exc) or exc.__class__.__name__)
        if not created.ok or not created.endpoint:
            error = created.error or "provider returned no endpoint"
            log.record(
                ProvisionStep.CREATE_BRANCH, False, error=error, details=created.details
            )
            return ProvisionResult(
                tenant_id=tenant_id,
                ok=False,
                branch_name=branch_name,
                failed_step=ProvisionStep.CREATE_BRANCH,
                error=error,
                steps=log.steps,
            )
        endpoint = created.endpoint
        log.record(ProvisionStep.CREATE_BRANCH, True, details=created.details)

        try:
            handle = self.registry.open_direct(tenant_id, endpoint)
        except ConfigurationError as exc:
            log.record(ProvisionStep.INITIALIZE_SCHEMA, False, error=exc.message)
            log.skip(
                ProvisionStep.SEED_CONTENT,
                ProvisionStep.SEED_SETTINGS,
                ProvisionStep.PERSIST_MAPPING,
                ProvisionStep.ACTIVATE_TENANT,
                ProvisionStep.GRANT_ADMIN,
            )
            return ProvisionResult(
                tenant_id=tenant_id,
                ok=False,
                branch_name=branch_name,
                endpoint=endpoint,
                failed_step=ProvisionStep.INITIALIZE_SCHEMA,
                error=exc.message,
                steps=log.steps,
            )

        # A new branch may reuse the endpoint of a deleted one.
        self.schema_engine.forget(endpoint)
        schema = await self.schema_engine.ensure(
            handle, self.baseline, set_name=self.baseline_set_name
        )
        log.record(
            ProvisionStep.INITIALIZE_SCHEMA,
            schema.converged,
            error=None if schema.converged else f"{len(schema.failed)} statement(s) failed",
            details={"applied": len(schema.applied), "failed": schema.failed},
        )

        seed_failures: list[PartialSeedFailure] = []
        for step, seed in (
            (ProvisionStep.SEED_CONTENT, self.seeder.seed_content),
            (ProvisionStep.SEED_SETTINGS, self.seeder.seed_settings),
        ):
            try:
                failures = await seed(handle, tenant_id)
            except Exception as exc:  # best-effort step: recorded, run continues
                logger.exception("Provision tenant %s: %s raised", tenant_id, step.value)
                failures = [PartialSeedFailure(step.value, str(exc))]
            seed_failures.extend(failures)
            log.record(
                step,
                not failures,
                error="; ".join(f.item for f in failures) or None,
                details={"failures": len(failures)},
            )

        try:
            previous = await self.directory.get_mapping(tenant_id)
            await self.directory.set_mapping(
                tenant_id,
                endpoint,
                source=MappingSource.PROVISION.value,
                updated_by=actor_id,
            )
        except Exception as exc:
            logger.exception("Provision tenant %s: mapping write raised", tenant_id)
            log.record(ProvisionStep.PERSIST_MAPPING, False, error=str(exc))
            log.skip(ProvisionStep.ACTIVATE_TENANT, ProvisionStep.GRANT_ADMIN)
            return ProvisionResult(
                tenant_id=tenant_id,
                ok=False,
                branch_name=branch_name,
                endpoint=endpoint,
                failed_step=ProvisionStep.PERSIST_MAPPING,
                error=str(exc),
                steps=log.steps,
                seed_failures=seed_failures,
            )
        mapping_details: dict[str, Any] = {"endpoint": endpoint}
        if previous is not None and previous.endpoint != endpoint:
            logger.warning(
                "Tenant %s re-provisioned: mapping overwritten, previous branch left in place",
                tenant_id,
            )
            mapping_details["previous_endpoint"] = previous.endpoint
        log.record(ProvisionStep.PERSIST_MAPPING, True, details=mapping_details)

        try:
            await self.tenants.activate(tenant_id)
        except Exception as exc:
            logger.exception("Provision tenant %s: activation raised", tenant_id)
            log.record(ProvisionStep.ACTIVATE_TENANT, False, error=str(exc))
            log.skip(ProvisionStep.GRANT_ADMIN)
            return ProvisionResult(
                tenant_id=tenant_id,
                ok=False,
                branch_name=branch_name,
                endpoint=endpoint,
                failed_step=ProvisionStep.ACTIVATE_TENANT,
                error=str(exc),
                steps=log.steps,
                seed_failures=seed_failures,
            )
        log.record(ProvisionStep.ACTIVATE_TENANT, True)

        if tenant.owner_subject_id:
            try:
                await self.access.grant_tenant_admin(tenant.owner_subject_id, tenant_id)
            except Exception as exc:
                logger.exception("Provision tenant %s: admin grant raised", tenant_id)
                log.record(ProvisionStep.GRANT_ADMIN, False, error=str(exc))
            else:
                log.record(
                    ProvisionStep.GRANT_ADMIN,
                    True,
                    details={"subject_id": tenant.owner_subject_id},
                )
        else:
            log.record(ProvisionStep.GRANT_ADMIN, False, skipped=True)

        return ProvisionResult(
            tenant_id=tenant_id,
            ok=True,
            branch_name=branch_name,
            endpoint=endpoint,
            steps=log.steps,
            seed_failures=seed_failures,
        )
