"""
Plant.id health assessment and species identification.

Two response shapes are accepted for the health block: the flattened
``{"disease": ..., "probability": ...}`` form and the API's own
``{"is_healthy": ..., "diseases": [{"name", "probability"}]}`` form.
"""
import base64
from typing import Any, Dict, List, Optional

from ..schemas import GeoCoordinates, HealthAssessment, ImageInput, PlantHealthPayload, SpeciesSuggestion
from .base import ProviderAdapter

PLANT_ID_URL = "https://api.plant.id/v2/identify"


def _parse_health(block: Any) -> Optional[HealthAssessment]:
    if not isinstance(block, dict):
        return None
    if "probability" in block:
        return HealthAssessment(disease=block.get("disease") or None, probability=float(block["probability"]))
    if block.get("is_healthy"):
        return HealthAssessment(disease=None, probability=float(block.get("is_healthy_probability", 0.0)))
    diseases = block.get("diseases") or []
    if diseases:
        top = diseases[0]
        return HealthAssessment(disease=top.get("name") or None, probability=float(top.get("probability", 0.0)))
    return None


def _parse_suggestions(raw: Dict[str, Any]) -> List[SpeciesSuggestion]:
    result = raw.get("result") or {}
    suggestions = (result.get("classification") or {}).get("suggestions")
    if suggestions is None:
        suggestions = raw.get("suggestions") or []
    out = []
    for s in suggestions:
        name = s.get("name") or s.get("plant_name")
        if not name:
            continue
        out.append(SpeciesSuggestion(name=name, probability=float(s.get("probability", 0.0))))
    return out


def parse_plant_id_response(raw: Dict[str, Any]) -> PlantHealthPayload:
    if not isinstance(raw, dict):
        raise ValueError("Plant.id payload is not an object")
    health = _parse_health(raw.get("health_assessment"))
    suggestions = _parse_suggestions(raw)
    if health is None and not suggestions:
        raise ValueError("No health assessment or suggestions in Plant.id payload")
    return PlantHealthPayload(health=health, suggestions=suggestions)


class PlantIdAdapter(ProviderAdapter):
    name = "plantId"

    def __init__(self, client, api_key: str):
        super().__init__(client)
        self.api_key = api_key

    async def fetch(self, image: ImageInput, geo: Optional[GeoCoordinates] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "images": [base64.b64encode(image.data).decode("ascii")],
            "modifiers": ["health_all", "disease_similar_images"],
            "plant_details": ["common_names", "url", "wiki_description", "taxonomy"],
        }
        if geo is not None:
            body["latitude"] = geo.latitude
            body["longitude"] = geo.longitude
        resp = await self.client.post(
            PLANT_ID_URL,
            json=body,
            headers={"Content-Type": "application/json", "Api-Key": self.api_key},
        )
        resp.raise_for_status()
        return resp.json()

    def parse(self, raw: Dict[str, Any]) -> PlantHealthPayload:
        return parse_plant_id_response(raw)
