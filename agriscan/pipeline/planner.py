"""
Fallback selector.

Builds, from the settings object, which adapters run for a request and in
what order the alternates are tried. Label and tag providers run side by
side; the health and weather capabilities are chains where each entry is
only tried when the previous one failed.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from ..config import Settings
from ..schemas import GeoCoordinates, ImageInput, ProviderFailure
from ..services import (
    AzureVisionAdapter,
    GeminiVisionAdapter,
    GoogleVisionAdapter,
    GroqVisionAdapter,
    OpenMeteoAdapter,
    OpenWeatherMapAdapter,
    PlantIdAdapter,
    ProviderAdapter,
    SyntheticMetricsProvider,
)

logger = logging.getLogger(__name__)


@dataclass
class ProviderPlan:
    labels: List[ProviderAdapter] = field(default_factory=list)
    tags: List[ProviderAdapter] = field(default_factory=list)
    health_chain: List[ProviderAdapter] = field(default_factory=list)
    weather_chain: List[ProviderAdapter] = field(default_factory=list)
    synthetic: SyntheticMetricsProvider = field(default_factory=SyntheticMetricsProvider)

    def active(self) -> List[str]:
        adapters = self.labels + self.tags + self.health_chain + self.weather_chain
        return [a.name for a in adapters]


def plan_providers(settings: Settings, client: httpx.AsyncClient, rng: Optional[random.Random] = None) -> ProviderPlan:
    if rng is None and settings.synthetic_seed is not None:
        rng = random.Random(settings.synthetic_seed)
    plan = ProviderPlan(synthetic=SyntheticMetricsProvider(rng))

    if settings.google_vision_api_key:
        plan.labels.append(GoogleVisionAdapter(client, settings.google_vision_api_key))
    if settings.azure_configured:
        plan.tags.append(AzureVisionAdapter(client, settings.azure_vision_endpoint, settings.azure_vision_key))

    if settings.plant_id_api_key:
        plan.health_chain.append(PlantIdAdapter(client, settings.plant_id_api_key))
    if settings.groq_api_key:
        plan.health_chain.append(GroqVisionAdapter(client, settings.groq_api_key, settings.groq_model))
    gemini_keys = settings.gemini_keys()
    if gemini_keys:
        plan.health_chain.append(GeminiVisionAdapter(client, gemini_keys[0], settings.gemini_model))

    if settings.openweather_api_key:
        plan.weather_chain.append(OpenWeatherMapAdapter(client, settings.openweather_api_key))
    if settings.open_meteo_fallback:
        plan.weather_chain.append(OpenMeteoAdapter(client))

    logger.info("Provider plan: %s", plan.active() or "synthetic only")
    return plan


async def run_chain(chain: List[ProviderAdapter], image: ImageInput, geo: Optional[GeoCoordinates] = None) -> list:
    """Try each adapter in order until one succeeds.

    Returns every outcome attempted, the last one being the success if any.
    An empty list means nothing was configured.
    """
    outcomes = []
    for adapter in chain:
        outcome = await settle(adapter, image, geo)
        outcomes.append(outcome)
        if outcome.status == "success":
            break
        logger.info("[%s] falling back: %s", adapter.name, outcome.reason)
    return outcomes


async def settle(adapter: ProviderAdapter, image: ImageInput, geo: Optional[GeoCoordinates] = None):
    """Invoke an adapter, converting any escaped error into a failure outcome."""
    try:
        return await adapter.invoke(image, geo)
    except Exception as e:
        logger.exception("[%s] adapter raised past its boundary", adapter.name)
        return ProviderFailure(provider=adapter.name, reason=f"Unhandled error: {e}")
