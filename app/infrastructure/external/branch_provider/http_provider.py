"""HTTP client for the database-branch provider (Turso platform API).

create_branch() creates a database seeded from the source database and
turns the reported hostname into an endpoint through the configured
template. Provider and transport failures are returned as ok=False results
carrying the raw error; nothing here raises for a failed remote call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from app.application.dtos.provisioning import BranchCreation, BranchDeletion

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def _error_text(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"


class HttpBranchProvider:
    """Branch provider speaking the organizations/{org}/databases API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_url: str,
        api_token: str | None,
        organization: str,
        endpoint_template: str,
        timeout: float = 30.0,
    ) -> None:
        self.client = client
        self.api_url = api_url.rstrip("/")
        self.api_token = api_token
        self.organization = organization
        self.endpoint_template = endpoint_template
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient) -> HttpBranchProvider:
        token = settings.branch_provider_api_token
        return cls(
            client,
            api_url=settings.branch_provider_api_url,
            api_token=token.get_secret_value() if token else None,
            organization=settings.branch_provider_organization,
            endpoint_template=settings.branch_endpoint_template,
            timeout=settings.branch_provider_timeout_seconds,
        )

    @property
    def _databases_url(self) -> str:
        return f"{self.api_url}/organizations/{self.organization}/databases"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def _missing_config(self) -> str | None:
        if not self.api_token:
            return "branch provider API token is not configured"
        if not self.organization:
            return "branch provider organization is not configured"
        return None

    async def create_branch(
        self, db_name: str, branch_name: str, region: str | None = None
    ) -> BranchCreation:
        """Create branch_name seeded from db_name in region (provider group)."""
        missing = self._missing_config()
        if missing:
            return BranchCreation(ok=False, error=missing)
        if not db_name:
            return BranchCreation(ok=False, error="source database is not configured")

        payload: dict[str, Any] = {
            "name": branch_name,
            "group": region or "default",
            "seed": {"type": "database", "name": db_name},
        }
        try:
            response = await self.client.post(
                self._databases_url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            logger.warning("Branch provider create %s failed: %s", branch_name, exc)
            return BranchCreation(ok=False, error=str(exc) or exc.__class__.__name__)

        if response.status_code >= 400:
            error = _error_text(response)
            logger.warning(
                "Branch provider refused %s (HTTP %s): %s",
                branch_name,
                response.status_code,
                error,
            )
            return BranchCreation(
                ok=False, error=error, details={"status_code": response.status_code}
            )

        try:
            body = response.json()
        except ValueError:
            logger.warning("Branch provider answered %s with a non-JSON body", branch_name)
            return BranchCreation(
                ok=False,
                error=f"provider response is not JSON: {response.text[:200]}",
                details={"status_code": response.status_code},
            )
        database = body.get("database") if isinstance(body, dict) else None
        if not isinstance(database, dict):
            return BranchCreation(
                ok=False,
                error="provider response has no database object",
                details={"status_code": response.status_code},
            )
        hostname = database.get("Hostname") or database.get("hostname")
        if not hostname:
            return BranchCreation(
                ok=False,
                error="provider response has no hostname",
                details={"response": database},
            )
        endpoint = self.endpoint_template.format(hostname=hostname)
        logger.info("Branch %s created at %s", branch_name, hostname)
        return BranchCreation(
            ok=True,
            endpoint=endpoint,
            details={"name": database.get("Name", branch_name), "hostname": hostname},
        )

    def database_name_for(self, endpoint: str) -> str | None:
        """Provider database name from an endpoint built by create_branch()."""
        try:
            host = make_url(endpoint).host
        except ArgumentError:
            return None
        if not host:
            return None
        label = host.split(".", 1)[0]
        suffix = f"-{self.organization}"
        if self.organization and label.endswith(suffix):
            label = label[: -len(suffix)]
        return label or None

    async def delete_database(self, endpoint: str) -> BranchDeletion:
        """Delete the provider database behind endpoint. 404 counts as deleted."""
        missing = self._missing_config()
        if missing:
            return BranchDeletion(ok=False, error=missing)
        name = self.database_name_for(endpoint)
        if not name:
            return BranchDeletion(ok=False, error="cannot derive database name from endpoint")
        try:
            response = await self.client.delete(
                f"{self._databases_url}/{name}",
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            logger.warning("Branch provider delete %s failed: %s", name, exc)
            return BranchDeletion(ok=False, error=str(exc) or exc.__class__.__name__)
        if response.status_code == 404:
            logger.info("Branch database %s already gone", name)
            return BranchDeletion(ok=True)
        if response.status_code >= 400:
            return BranchDeletion(ok=False, error=_error_text(response))
        logger.info("Branch database %s deleted", name)
        return BranchDeletion(ok=True)
