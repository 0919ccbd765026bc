"""Client for the external image build service.

The build service clones a GitHub repository with the given installation
token, builds it with the Dockerfile we send, and returns a build id right
away. The build itself runs remotely; progress is reported elsewhere.

    POST {build_service_url}/v1/images/github
    {"dockerfile": "...", "dockerignore": "...", "token": "...", "repository": "user/repo", "branch": "main"}
    → {"buildId": "bld_123"}
"""

import logging
from dataclasses import dataclass

import httpx

from apps.api.config import settings
from apps.api.exceptions import BuildServiceException

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    build_id: str


class BuildClient:
    """Thin async wrapper around the build service's HTTP API."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.build_service_url).rstrip("/")
        self.api_key = settings.build_service_api_key if api_key is None else api_key
        self.timeout = timeout or settings.build_service_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy HTTP client, created on the first build request."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def build_image_from_github(
        self,
        *,
        dockerfile: str,
        dockerignore: str,
        token: str,
        repository: str,
        branch: str,
    ) -> BuildResult:
        """Ask the build service to build an image from a GitHub branch.

        Raises:
            BuildServiceException: the service was unreachable, answered with
                an error status, or did not return a build id.
        """
        body = {
            "dockerfile": dockerfile,
            "dockerignore": dockerignore,
            "token": token,
            "repository": repository,
            "branch": branch,
        }

        try:
            response = await self._get_client().post("/v1/images/github", json=body)
        except httpx.HTTPError as e:
            logger.error("Build service request failed for %s: %s", repository, e)
            raise BuildServiceException(f"Build service unreachable: {e}") from e

        if response.is_error:
            logger.error(
                "Build service rejected build for %s@%s: %s %s",
                repository,
                branch,
                response.status_code,
                response.text[:500],
            )
            raise BuildServiceException(
                f"Build service rejected the build for {repository}",
                upstream_status=response.status_code,
            )

        try:
            build_id = response.json().get("buildId")
        except ValueError as e:
            raise BuildServiceException("Build service returned invalid JSON") from e

        if not build_id:
            raise BuildServiceException("Build service response is missing buildId")

        return BuildResult(build_id=str(build_id))

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton
build_client = BuildClient()
