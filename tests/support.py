"""Test doubles and helpers shared by fixtures and tests."""

from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine

from app.application.dtos.provisioning import BranchCreation, BranchDeletion
from app.core.container import ServiceContainer
from app.infrastructure.persistence.database import build_engine
from app.infrastructure.persistence.repositories.access_repo import AccessRepository
from app.infrastructure.security import JwtIdentityResolver

TEST_SECRET = "test-secret-key"
FALLBACK_ROOT = "sites.example.net"
SUPER_ADMIN = "super-admin-1"


class StubBranchProvider:
    """In-memory branch provider: branch-N endpoints, optional forced failures."""

    def __init__(self) -> None:
        self.created: list[str] = []
        self.deleted: list[str] = []
        self.create_error: str | None = None
        self.delete_error: str | None = None

    async def create_branch(
        self, db_name: str, branch_name: str, region: str | None = None
    ) -> BranchCreation:
        if self.create_error:
            return BranchCreation(ok=False, error=self.create_error)
        self.created.append(branch_name)
        tenant_number = branch_name.rsplit("-", 1)[-1]
        return BranchCreation(
            ok=True, endpoint=f"db://branch-{tenant_number}", details={"name": branch_name}
        )

    async def delete_database(self, endpoint: str) -> BranchDeletion:
        if self.delete_error:
            return BranchDeletion(ok=False, error=self.delete_error)
        self.deleted.append(endpoint)
        return BranchDeletion(ok=True)


class MemoryCache:
    """Dict-backed CacheProtocol implementation (TTL ignored)."""

    def __init__(self) -> None:
        self.data: dict[str, object] = {}

    def is_available(self) -> bool:
        return True

    async def get(self, key: str) -> object:
        return self.data.get(key)

    async def set(self, key: str, value: object, ttl: int = 300) -> bool:
        self.data[key] = value
        return True

    async def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        prefix = pattern.rstrip("*")
        doomed = [key for key in self.data if key.startswith(prefix)]
        for key in doomed:
            del self.data[key]
        return len(doomed)


def make_engine_factory(base: Path):
    """Map db://<name> endpoints to SQLite files under base; pass real URLs through."""

    def factory(endpoint: str) -> AsyncEngine:
        if endpoint.startswith("db://"):
            name = endpoint.removeprefix("db://")
            return build_engine(f"sqlite+aiosqlite:///{base / name}.db")
        return build_engine(endpoint)

    return factory


async def grant_super_admin(services: ServiceContainer, subject_id: str = SUPER_ADMIN) -> None:
    async with services.registry.primary.transaction() as session:
        await AccessRepository(session).add_super_admin(subject_id)


def bearer(identity: JwtIdentityResolver, subject_id: str) -> dict[str, str]:
    """Authorization header for subject_id."""
    return {"Authorization": f"Bearer {identity.issue(subject_id)}"}
