"""Leonardo image-generation API client."""

import json
from dataclasses import dataclass
from typing import Protocol

import httpx

from photobooth.domain.generation import JobSnapshot, JobStatus

LANDSCAPE_SIZE = (1248, 832)
PORTRAIT_SIZE = (832, 1248)


class GenerationClient(Protocol):
    """Interface for the external image-generation provider."""

    async def upload_image(self, data: bytes, extension: str = "jpg") -> str:
        """Upload a source image and return the provider image id."""

    async def submit_generation(  # noqa: PLR0913
        self,
        *,
        prompt: str,
        model_id: str,
        style_id: str,
        init_image_id: str,
        is_landscape: bool,
    ) -> str:
        """Submit a generation job and return its id."""

    async def get_generation(self, generation_id: str) -> JobSnapshot:
        """Return the current status of a generation job."""

    async def download_image(self, url: str) -> tuple[bytes, str | None]:
        """Download a generated image and return bytes and content type."""

    async def get_user_info(self) -> dict[str, object]:
        """Return account information for the configured API key."""


@dataclass
class HttpxLeonardoClient(GenerationClient):
    """HTTPX-backed Leonardo client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 30

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxLeonardoClient":
        """Create a Leonardo client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def _request(
        self, method: str, endpoint: str, payload: dict[str, object] | None = None
    ) -> dict[str, object]:
        response = await self.http_client.request(
            method,
            f"{self.base_url}{endpoint}",
            json=payload,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Accept": "application/json",
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def upload_image(self, data: bytes, extension: str = "jpg") -> str:
        """Upload via a presigned form returned by /init-image."""
        payload = await self._request("POST", "/init-image", {"extension": extension})
        init = payload["uploadInitImage"]
        fields = init["fields"]
        if isinstance(fields, str):
            fields = json.loads(fields)
        response = await self.http_client.post(
            init["url"],
            data=fields,
            files={"file": ("image." + extension, data)},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return init["id"]

    async def submit_generation(  # noqa: PLR0913
        self,
        *,
        prompt: str,
        model_id: str,
        style_id: str,
        init_image_id: str,
        is_landscape: bool,
    ) -> str:
        """Submit a single-image generation guided by the uploaded image."""
        width, height = LANDSCAPE_SIZE if is_landscape else PORTRAIT_SIZE
        payload = await self._request(
            "POST",
            "/generations",
            {
                "modelId": model_id,
                "prompt": prompt,
                "enhancePrompt": True,
                "width": width,
                "height": height,
                "num_images": 1,
                "styleUUID": style_id,
                "contrastRatio": 0.5,
                "contextImages": [{"type": "UPLOADED", "id": init_image_id}],
            },
        )
        return payload["sdGenerationJob"]["generationId"]

    async def get_generation(self, generation_id: str) -> JobSnapshot:
        """Fetch a generation job's status and result URLs."""
        payload = await self._request("GET", f"/generations/{generation_id}")
        generation = payload.get("generations_by_pk") or {}
        images = generation.get("generated_images") or []
        return JobSnapshot(
            status=JobStatus.from_provider(generation.get("status")),
            image_urls=[image["url"] for image in images if image.get("url")],
        )

    async def download_image(self, url: str) -> tuple[bytes, str | None]:
        """Download a generated image."""
        response = await self.http_client.get(url, timeout=self.timeout)
        response.raise_for_status()
        content_type = response.headers.get("content-type")
        if content_type:
            content_type = content_type.split(";", 1)[0].strip()
        return response.content, content_type

    async def get_user_info(self) -> dict[str, object]:
        """Return the provider's /me payload."""
        return await self._request("GET", "/me")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
