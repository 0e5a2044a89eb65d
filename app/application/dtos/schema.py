"""DTOs for schema convergence results."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SchemaEnsureResult:
    """Outcome of ensure(handle, statements).

    applied lists statements that ran without error, failed maps statement
    name to the swallowed error. cached is True when the endpoint had
    already converged on this statement set and nothing ran.
    """

    endpoint: str
    statement_set: str | None = None
    applied: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    cached: bool = False

    @property
    def converged(self) -> bool:
        return not self.failed
