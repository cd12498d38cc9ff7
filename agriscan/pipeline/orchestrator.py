"""
Fan-out orchestrator.

One request is a single pass: collect every provider outcome concurrently,
merge them into a finding, synthesize the report. All branches are awaited
together, so latency follows the slowest branch and one failure never
cancels the others. Cancelling the request cancels every in-flight call.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..schemas import (
    DiagnosticReport,
    GeoCoordinates,
    ImageInput,
    NormalizedFinding,
    ProviderSuccess,
    ProviderTrace,
    SyntheticMetrics,
    WeatherSnapshot,
)
from .merger import merge_outcomes
from .planner import ProviderPlan, run_chain, settle
from .report import build_report

logger = logging.getLogger(__name__)

RAW_DATA_PROVIDERS = ["googleVision", "plantId", "azureVision", "groq", "gemini"]


@dataclass
class Collection:
    """Everything gathered for one request."""

    evidence: List[Any] = field(default_factory=list)
    weather_outcomes: List[Any] = field(default_factory=list)
    metrics_outcome: Optional[Any] = None
    health_attempted: bool = False

    @property
    def weather(self) -> Optional[WeatherSnapshot]:
        for o in self.weather_outcomes:
            if isinstance(o, ProviderSuccess) and isinstance(o.payload, WeatherSnapshot):
                return o.payload
        return None

    def all_outcomes(self) -> List[Any]:
        outcomes = self.evidence + self.weather_outcomes
        if self.metrics_outcome is not None:
            outcomes.append(self.metrics_outcome)
        return outcomes

    def succeeded(self, provider: str) -> bool:
        return any(o.provider == provider and o.status == "success" for o in self.all_outcomes())


async def _skipped() -> list:
    return []


class AnalysisOrchestrator:
    def __init__(self, plan: ProviderPlan):
        self.plan = plan

    async def collect(self, image: ImageInput, geo: Optional[GeoCoordinates] = None) -> Collection:
        plan = self.plan
        independent, health, weather, metrics = await asyncio.gather(
            asyncio.gather(*[settle(a, image, geo) for a in plan.labels + plan.tags]),
            run_chain(plan.health_chain, image, geo),
            run_chain(plan.weather_chain, image, geo) if geo is not None else _skipped(),
            settle(plan.synthetic, image, geo),
        )
        return Collection(
            evidence=list(independent) + list(health),
            weather_outcomes=list(weather),
            metrics_outcome=metrics,
            health_attempted=bool(plan.health_chain),
        )

    def _metrics(self, collection: Collection) -> SyntheticMetrics:
        outcome = collection.metrics_outcome
        if isinstance(outcome, ProviderSuccess) and isinstance(outcome.payload, SyntheticMetrics):
            return outcome.payload
        return self.plan.synthetic.parse(self.plan.synthetic.draw())

    def _warnings(self, collection: Collection, finding: NormalizedFinding, geo: Optional[GeoCoordinates]) -> List[str]:
        warnings = []
        if not finding.sources:
            if collection.health_attempted:
                warnings.append("Plant-health services unavailable. Showing placeholder diagnosis.")
            else:
                warnings.append(
                    "No plant-health service configured. Set PLANT_ID_API_KEY, GROQ_API_KEY or GEMINI_API_KEY for a real diagnosis."
                )
        if geo is not None and collection.weather is None:
            warnings.append("Weather data unavailable. Environmental analysis uses placeholder values.")
        return warnings

    def raw_data(self, collection: Collection) -> Dict[str, Optional[Any]]:
        raw: Dict[str, Optional[Any]] = {name: None for name in RAW_DATA_PROVIDERS}
        for o in collection.evidence:
            if isinstance(o, ProviderSuccess) and o.provider in raw:
                raw[o.provider] = o.raw
        weather = collection.weather
        raw["weather"] = weather.model_dump() if weather is not None else None
        return raw

    async def analyze(
        self, image: ImageInput, geo: Optional[GeoCoordinates] = None
    ) -> Tuple[DiagnosticReport, Dict[str, Optional[Any]]]:
        started = time.perf_counter()
        collection = await self.collect(image, geo)
        finding = merge_outcomes(collection.evidence)
        logger.info(
            "Merged finding disease=%r confidence=%.1f severity=%s sources=%s",
            finding.disease_name, finding.confidence, finding.severity.value, list(finding.sources),
        )

        services = {name: collection.succeeded(name) for name in RAW_DATA_PROVIDERS}
        services["weather"] = collection.weather is not None
        services["synthetic"] = not finding.sources

        traces = [
            ProviderTrace(
                name=o.provider,
                status=o.status,
                latencyMs=o.latency_ms,
                reason=getattr(o, "reason", None),
            )
            for o in collection.all_outcomes()
        ]

        report = build_report(
            finding,
            image,
            metrics=self._metrics(collection),
            weather=collection.weather,
            services=services,
            providers=traces,
            warnings=self._warnings(collection, finding, geo),
            elapsed_seconds=time.perf_counter() - started,
            rng=self.plan.synthetic.rng,
        )
        return report, self.raw_data(collection)


def create_orchestrator(plan: ProviderPlan) -> AnalysisOrchestrator:
    return AnalysisOrchestrator(plan)
