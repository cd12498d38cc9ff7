"""
Report synthesizer.

Expands a ``NormalizedFinding`` into the full ``DiagnosticReport``. Care
advice, pathogen, efficacy and epidemiology come from the lookup tables in
``knowledge``; economics and weather sections follow fixed rules; metrics
with no real source come from the ``SyntheticMetrics`` filler.
"""
import math
import random
import string
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from ..schemas import (
    CurrentConditions,
    DiagnosticReport,
    EconomicImpact,
    EnvironmentalAnalysis,
    Epidemiology,
    ForecastDay,
    ImageInput,
    ImageMetadata,
    InsuranceInfo,
    NormalizedFinding,
    PathogenInfo,
    ProviderTrace,
    Severity,
    SyntheticMetrics,
    TechnicalMetrics,
    TreatmentEfficacy,
    WeatherAnalysis,
    WeatherSnapshot,
)
from . import knowledge

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
BASE36 = string.digits + string.ascii_lowercase


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def care_advice(condition: Optional[str], observed: Sequence[str] = ()) -> Dict[str, List[str]]:
    """Symptoms, treatments and prevention for the reported condition.

    Symptoms a chat-vision model described replace the generic symptom list
    when the condition has no table entry.
    """
    if not condition:
        return {
            "symptoms": list(knowledge.DEFAULT_SYMPTOMS),
            "treatments": list(knowledge.DEFAULT_TREATMENTS),
            "prevention": list(knowledge.DEFAULT_PREVENTION),
        }
    return {
        "symptoms": list(knowledge.lookup(knowledge.SYMPTOMS, condition) or observed or knowledge.UNMATCHED_SYMPTOMS),
        "treatments": list(knowledge.lookup(knowledge.TREATMENTS, condition) or knowledge.UNMATCHED_TREATMENTS),
        "prevention": list(knowledge.lookup(knowledge.PREVENTION, condition) or knowledge.UNMATCHED_PREVENTION),
    }


def pathogen_info(disease: str) -> PathogenInfo:
    return PathogenInfo(**(knowledge.lookup(knowledge.PATHOGENS, disease) or knowledge.UNKNOWN_PATHOGEN))


def treatment_efficacy(disease: str) -> TreatmentEfficacy:
    return TreatmentEfficacy(**(knowledge.lookup(knowledge.TREATMENT_EFFICACY, disease) or knowledge.DEFAULT_EFFICACY))


def epidemiology(disease: str) -> Epidemiology:
    return Epidemiology(**(knowledge.lookup(knowledge.EPIDEMIOLOGY, disease) or knowledge.DEFAULT_EPIDEMIOLOGY))


def economic_impact(severity: Severity) -> EconomicImpact:
    loss, cost = knowledge.ECONOMIC_BASELINE[Severity(severity).value]
    net = loss - cost
    return EconomicImpact(
        potentialLoss=loss,
        treatmentCost=cost,
        netSavings=net,
        roi=net / cost * 100,
        insurance=InsuranceInfo(riskLevel="High" if severity == Severity.HIGH else "Medium"),
    )


def environmental_analysis(weather: Optional[WeatherSnapshot]) -> EnvironmentalAnalysis:
    if weather is None:
        return EnvironmentalAnalysis(
            temperatureFavorability="Unknown",
            humidityImpact="Unknown",
            soilPHCompatibility="Unknown",
            airCirculation="Unknown",
        )
    return EnvironmentalAnalysis(
        temperatureFavorability="High" if weather.temperature > 25 else "Moderate",
        humidityImpact="High" if weather.humidity > 70 else "Moderate",
        soilPHCompatibility="Neutral",
        airCirculation="Good" if weather.windSpeed > 10 else "Poor",
    )


def weather_analysis(weather: Optional[WeatherSnapshot]) -> WeatherAnalysis:
    if weather is None:
        return WeatherAnalysis(
            currentConditions=CurrentConditions(temperature=24, humidity=70, rainfall=10, windSpeed=8),
            diseaseFavorability=60,
            forecast=[ForecastDay(day=d, temp=22 + i, humidity=70 + i * 2) for i, d in enumerate(WEEKDAYS)],
            source="synthetic",
        )
    favorability = 85 if weather.humidity > 70 and weather.temperature > 20 else 60
    return WeatherAnalysis(
        # rainfall is not part of the current-conditions lookup
        currentConditions=CurrentConditions(
            temperature=weather.temperature,
            humidity=weather.humidity,
            rainfall=0,
            windSpeed=weather.windSpeed,
        ),
        diseaseFavorability=favorability,
        forecast=[
            ForecastDay(day=d, temp=weather.temperature + (i - 3), humidity=weather.humidity + (i - 3) * 2)
            for i, d in enumerate(WEEKDAYS)
        ],
        source=weather.source,
    )


def keyword_matches(labels: Sequence[str], tags: Sequence[str]) -> List[str]:
    return [item for item in list(labels) + list(tags) if any(k in item.lower() for k in knowledge.PLANT_KEYWORDS)]


def image_quality_score(labels: Sequence[str], tags: Sequence[str]) -> int:
    return min(70 + len(keyword_matches(labels, tags)) * 5, 100)


def image_format(filename: str) -> str:
    """Upper-cased text after the last dot; a name without a dot is used whole."""
    return filename.rsplit(".", 1)[-1].strip().upper() or "JPEG"


def make_analysis_id(now: datetime, rng: random.Random) -> str:
    suffix = "".join(rng.choice(BASE36) for _ in range(9))
    return f"ANALYSIS_{int(now.timestamp() * 1000)}_{suffix}"


def build_report(
    finding: NormalizedFinding,
    image: ImageInput,
    metrics: SyntheticMetrics,
    weather: Optional[WeatherSnapshot] = None,
    services: Optional[Dict[str, bool]] = None,
    providers: Optional[List[ProviderTrace]] = None,
    warnings: Optional[List[str]] = None,
    elapsed_seconds: float = 0.0,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> DiagnosticReport:
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)
    advice = care_advice(finding.condition, finding.observed_symptoms)

    technical = TechnicalMetrics(
        imageQualityScore=image_quality_score(finding.labels, finding.tags),
        agriculturalKeywords=keyword_matches(finding.labels, finding.tags),
        processingSpeed=metrics.processing_speed,
        modelConfidence=finding.confidence,
        dataPointsAnalyzed=metrics.data_points_analyzed,
        similarCasesFound=metrics.similar_cases_found,
        treatmentSuccessRate=metrics.treatment_success_rate,
    )

    return DiagnosticReport(
        disease=finding.disease_name,
        confidence=round_half_up(finding.confidence),
        severity=finding.severity,
        symptoms=advice["symptoms"],
        treatments=advice["treatments"],
        prevention=advice["prevention"],
        imageLabels=list(finding.labels),
        imageTags=list(finding.tags),
        technicalMetrics=technical,
        pathogenIdentification=pathogen_info(finding.disease_name),
        environmentalAnalysis=environmental_analysis(weather),
        treatmentEfficacy=treatment_efficacy(finding.disease_name),
        epidemiology=epidemiology(finding.disease_name),
        economicImpact=economic_impact(finding.severity),
        weatherAnalysis=weather_analysis(weather),
        timestamp=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        filename=image.filename,
        analysisId=make_analysis_id(now, rng),
        processingTime=f"{elapsed_seconds:.1f}",
        imageMetadata=ImageMetadata(
            size=image.size,
            dimensions=f"{metrics.width}x{metrics.height}",
            format=image_format(image.filename),
            compression=metrics.compression,
        ),
        aiServices=dict(services or {}),
        providers=list(providers or []),
        warnings=list(warnings or []),
    )
