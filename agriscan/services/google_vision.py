"""Google Cloud Vision label detection over the REST endpoint."""
import base64
from typing import Any, Dict, Optional

from ..schemas import GeoCoordinates, ImageInput, LabelPayload, VisionLabel
from .base import ProviderAdapter

GOOGLE_VISION_URL = "https://vision.googleapis.com/v1/images:annotate"


def parse_google_vision_response(raw: Dict[str, Any]) -> LabelPayload:
    responses = raw.get("responses")
    if not isinstance(responses, list) or not responses:
        raise ValueError("No responses in Vision payload")
    first = responses[0] or {}
    if first.get("error"):
        raise ValueError(first["error"].get("message", "Vision API error"))
    labels = [
        VisionLabel(description=a.get("description") or "", confidence=float(a.get("score") or 0.0))
        for a in first.get("labelAnnotations") or []
    ]
    return LabelPayload(labels=labels)


class GoogleVisionAdapter(ProviderAdapter):
    name = "googleVision"

    def __init__(self, client, api_key: str, max_results: int = 15):
        super().__init__(client)
        self.api_key = api_key
        self.max_results = max_results

    async def fetch(self, image: ImageInput, geo: Optional[GeoCoordinates] = None) -> Dict[str, Any]:
        body = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image.data).decode("ascii")},
                    "features": [{"type": "LABEL_DETECTION", "maxResults": self.max_results}],
                }
            ]
        }
        resp = await self.client.post(GOOGLE_VISION_URL, params={"key": self.api_key}, json=body)
        resp.raise_for_status()
        return resp.json()

    def parse(self, raw: Dict[str, Any]) -> LabelPayload:
        return parse_google_vision_response(raw)
