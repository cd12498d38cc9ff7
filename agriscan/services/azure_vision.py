"""Azure Computer Vision image tags."""
from typing import Any, Dict, Optional

from ..schemas import GeoCoordinates, ImageInput, TagPayload, VisionTag
from .base import ProviderAdapter

ANALYZE_PATH = "/vision/v3.2/analyze"


def parse_azure_vision_response(raw: Dict[str, Any]) -> TagPayload:
    if not isinstance(raw, dict) or "tags" not in raw:
        raise ValueError("No tags in Azure payload")
    tags = [VisionTag(name=t["name"], confidence=float(t.get("confidence", 0.0))) for t in raw["tags"] or []]
    return TagPayload(tags=tags)


class AzureVisionAdapter(ProviderAdapter):
    name = "azureVision"

    def __init__(self, client, endpoint: str, key: str):
        super().__init__(client)
        self.endpoint = endpoint.rstrip("/")
        self.key = key

    async def fetch(self, image: ImageInput, geo: Optional[GeoCoordinates] = None) -> Dict[str, Any]:
        resp = await self.client.post(
            self.endpoint + ANALYZE_PATH,
            params={"visualFeatures": "Tags", "language": "en"},
            headers={"Content-Type": "application/octet-stream", "Ocp-Apim-Subscription-Key": self.key},
            content=image.data,
        )
        resp.raise_for_status()
        return resp.json()

    def parse(self, raw: Dict[str, Any]) -> TagPayload:
        return parse_azure_vision_response(raw)
