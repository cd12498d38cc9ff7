"""
Normalizer and merger.

Reduces the successful provider outcomes to one ``NormalizedFinding``.
Precedence: a plant-health probability sets confidence and severity, a
species identification then replaces the name and confidence, and generic
labels/tags are only collected for keyword heuristics. The result depends
only on the outcomes, never on wall-clock or randomness.
"""
from typing import Iterable, List, Optional, Tuple

from ..schemas import (
    ChatVisionPayload,
    HealthAssessment,
    LabelPayload,
    NormalizedFinding,
    PlantHealthPayload,
    ProviderSuccess,
    Severity,
    TagPayload,
)

UNKNOWN_DISEASE = "Unknown Disease"
HEALTHY_PLANT = "Healthy Plant"

HIGH_SEVERITY_THRESHOLD = 0.7
MODERATE_SEVERITY_THRESHOLD = 0.4


def severity_for(probability: float) -> Severity:
    if probability > HIGH_SEVERITY_THRESHOLD:
        return Severity.HIGH
    if probability > MODERATE_SEVERITY_THRESHOLD:
        return Severity.MODERATE
    return Severity.LOW


def format_percent(value: float) -> str:
    """Render a percentage without a trailing ``.0`` for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def health_from_chat(payload: ChatVisionPayload) -> Optional[HealthAssessment]:
    """A chat-vision diagnosis of "Unknown" carries no disease signal."""
    name = payload.diagnosis.strip()
    if payload.is_healthy or name.lower() in ("healthy", "healthy plant"):
        return HealthAssessment(disease=None, probability=payload.confidence)
    if name.lower() in ("unknown", "unknown condition", ""):
        return None
    return HealthAssessment(disease=name, probability=payload.confidence)


def _successes(outcomes: Iterable) -> List[ProviderSuccess]:
    return [o for o in outcomes if isinstance(o, ProviderSuccess)]


def _health_signal(successes: List[ProviderSuccess]) -> Tuple[Optional[HealthAssessment], Optional[str], Tuple[str, ...]]:
    for o in successes:
        if isinstance(o.payload, PlantHealthPayload) and o.payload.health is not None:
            return o.payload.health, o.provider, ()
    for o in successes:
        if isinstance(o.payload, ChatVisionPayload):
            health = health_from_chat(o.payload)
            if health is not None:
                return health, o.provider, tuple(o.payload.symptoms)
    return None, None, ()


def merge_outcomes(outcomes: Iterable) -> NormalizedFinding:
    successes = _successes(outcomes)
    disease_name = UNKNOWN_DISEASE
    confidence = 0.0
    severity = Severity.LOW
    condition = None
    sources: List[str] = []

    health, source, observed = _health_signal(successes)
    if health is not None:
        disease_name = health.disease or HEALTHY_PLANT
        confidence = health.probability * 100
        severity = severity_for(health.probability)
        condition = health.disease
        sources.append(source)

    for o in successes:
        if isinstance(o.payload, PlantHealthPayload) and o.payload.suggestions:
            top = o.payload.suggestions[0]
            disease_name = f"{top.name} ({format_percent(top.probability * 100)}% confidence)"
            confidence = top.probability * 100
            if o.provider not in sources:
                sources.append(o.provider)
            break

    labels: List[str] = []
    tags: List[str] = []
    for o in successes:
        if isinstance(o.payload, LabelPayload):
            labels.extend(label.description for label in o.payload.labels)
        elif isinstance(o.payload, TagPayload):
            tags.extend(tag.name for tag in o.payload.tags)

    return NormalizedFinding(
        disease_name=disease_name,
        confidence=min(max(confidence, 0.0), 100.0),
        severity=severity,
        labels=tuple(labels),
        tags=tuple(tags),
        condition=condition,
        observed_symptoms=observed,
        sources=tuple(sources),
    )
