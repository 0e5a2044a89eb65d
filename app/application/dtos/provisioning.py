"""DTOs for branch provisioning and teardown (saga step outcomes)."""

from dataclasses import dataclass, field
from typing import Any

from app.domain.enums import ProvisionStep
from app.domain.exceptions import PartialSeedFailure


@dataclass(frozen=True)
class BranchCreation:
    """Provider answer to create_branch: endpoint on success, raw error otherwise."""

    ok: bool
    endpoint: str | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BranchDeletion:
    """Provider answer to delete_database."""

    ok: bool
    error: str | None = None


@dataclass(frozen=True)
class StepOutcome:
    """Result of one provisioning step. skipped steps did not run."""

    step: ProvisionStep
    ok: bool
    error: str | None = None
    skipped: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.step.value,
            "ok": self.ok,
            "skipped": self.skipped,
            "error": self.error,
            "details": self.details,
        }


@dataclass(frozen=True)
class ProvisionResult:
    """Final result of provision(tenant_id).

    ok is True when the mapping was persisted and the tenant activated.
    failed_step names the step that ended the run (create-branch,
    initialize-schema when no handle could be built, persist-mapping or
    activate-tenant); best-effort failures only show up in steps and
    seed_failures.
    """

    tenant_id: int
    ok: bool
    branch_name: str
    endpoint: str | None = None
    failed_step: ProvisionStep | None = None
    error: str | None = None
    steps: list[StepOutcome] = field(default_factory=list)
    seed_failures: list[PartialSeedFailure] = field(default_factory=list)

    def step(self, name: ProvisionStep) -> StepOutcome | None:
        """Return the outcome recorded for a step, if it ran."""
        return next((s for s in self.steps if s.step == name), None)


@dataclass(frozen=True)
class TeardownResult:
    """Result of tearing down a tenant's branch (and optionally the tenant)."""

    tenant_id: int
    deleted_branch: bool
    branch_delete_ok: bool = False
    branch_delete_error: str | None = None
    endpoint: str | None = None
    reason: str | None = None
