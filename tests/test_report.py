import asyncio
import random
import re
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from agriscan.pipeline import knowledge
from agriscan.pipeline.report import (
    build_report,
    care_advice,
    economic_impact,
    epidemiology,
    environmental_analysis,
    image_format,
    image_quality_score,
    pathogen_info,
    round_half_up,
    treatment_efficacy,
    weather_analysis,
)
from agriscan.schemas import NormalizedFinding, Severity, SyntheticMetrics, WeatherSnapshot
from agriscan.services.synthetic import (
    COMPRESSION_RANGE,
    DATA_POINTS_RANGE,
    SIMILAR_CASES_RANGE,
    TREATMENT_SUCCESS_RANGE,
    SyntheticMetricsProvider,
)

from conftest import make_image

METRICS = SyntheticMetrics(
    processing_speed=2.1,
    data_points_analyzed=1500,
    similar_cases_found=700,
    treatment_success_rate=88,
    width=64,
    height=48,
    compression=80,
)


@pytest.mark.parametrize("severity,loss,cost", [
    (Severity.HIGH, 3000, 250),
    (Severity.MODERATE, 2000, 150),
    (Severity.LOW, 1000, 100),
])
def test_economic_impact(severity, loss, cost):
    impact = economic_impact(severity)
    assert impact.potentialLoss == loss
    assert impact.treatmentCost == cost
    assert impact.netSavings == loss - cost
    assert impact.roi == pytest.approx((loss - cost) / cost * 100)
    assert impact.insurance.riskLevel == ("High" if severity == Severity.HIGH else "Medium")


def test_leaf_blight_matches_before_generic_blight():
    advice = care_advice("Leaf Blight")
    assert "Apply copper-based fungicide" in advice["treatments"]
    assert advice["symptoms"] == knowledge.SYMPTOMS["leaf blight"]

    generic = care_advice("Late blight")
    assert generic["treatments"] == knowledge.TREATMENTS["blight"]


def test_care_advice_fallbacks():
    unmatched = care_advice("Bacterial spot")
    assert unmatched["symptoms"] == ["Visual symptoms detected", "Requires expert analysis"]
    assert unmatched["treatments"] == knowledge.UNMATCHED_TREATMENTS

    absent = care_advice(None)
    assert absent["symptoms"] == ["Visual symptoms detected", "Requires further analysis"]
    assert absent["treatments"] == ["Consult with agricultural expert", "Monitor plant health"]
    assert absent["prevention"] == ["Regular monitoring", "Proper plant care"]


def test_described_symptoms_fill_unmatched_condition():
    described = ["dark water-soaked spots", "yellow halos"]
    advice = care_advice("Bacterial spot", described)
    assert advice["symptoms"] == described
    assert advice["treatments"] == knowledge.UNMATCHED_TREATMENTS

    # table entries still win over described symptoms
    assert care_advice("Rust", described)["symptoms"] == knowledge.SYMPTOMS["rust"]

    finding = NormalizedFinding(
        disease_name="Bacterial spot",
        confidence=50.0,
        condition="Bacterial spot",
        observed_symptoms=tuple(described),
    )
    report = build_report(finding, make_image(), metrics=METRICS)
    assert report.symptoms == described


def test_pathogen_efficacy_and_epidemiology_lookups():
    assert pathogen_info("Powdery Mildew").species == "Erysiphe cichoracearum"
    assert pathogen_info("Rust").species == "Unknown"
    assert treatment_efficacy("root rot").copperBasedFungicide == 65
    assert treatment_efficacy("Unknown Disease").copperBasedFungicide == 80
    assert epidemiology("Downy mildew").firstReported == 1851
    assert epidemiology("Unknown Disease").seasonalPeak == "Year-round"


def test_weather_driven_sections():
    weather = WeatherSnapshot(temperature=28.0, humidity=82.0, description="rain", windSpeed=12.0)
    env = environmental_analysis(weather)
    assert env.temperatureFavorability == "High"
    assert env.humidityImpact == "High"
    assert env.airCirculation == "Good"
    assert env.soilPHCompatibility == "Neutral"

    analysis = weather_analysis(weather)
    assert analysis.diseaseFavorability == 85
    assert analysis.currentConditions.temperature == 28.0
    assert [d.day for d in analysis.forecast] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert analysis.forecast[0].temp == 25.0
    assert analysis.forecast[6].humidity == 88.0


def test_mild_weather_rules():
    weather = WeatherSnapshot(temperature=18.0, humidity=60.0, windSpeed=3.0)
    env = environmental_analysis(weather)
    assert env.temperatureFavorability == "Moderate"
    assert env.humidityImpact == "Moderate"
    assert env.airCirculation == "Poor"
    assert weather_analysis(weather).diseaseFavorability == 60


def test_placeholder_weather_sections():
    assert environmental_analysis(None).temperatureFavorability == "Unknown"
    analysis = weather_analysis(None)
    assert analysis.diseaseFavorability == 60
    assert analysis.currentConditions.rainfall == 10
    assert analysis.source == "synthetic"
    assert analysis.forecast[2].temp == 24


def test_image_quality_score():
    assert image_quality_score([], []) == 70
    assert image_quality_score(["Leaf", "Sky"], ["green plant"]) == 80
    assert image_quality_score(["leaf"] * 10, []) == 100


def test_image_format_and_rounding():
    assert image_format("tomato.leaf.jpg") == "JPG"
    assert image_format("leaf") == "LEAF"
    assert image_format("leaf.") == "JPEG"
    assert image_format("") == "JPEG"
    assert round_half_up(84.5) == 85
    assert round_half_up(0.0) == 0


def test_build_report_for_leaf_blight():
    finding = NormalizedFinding(
        disease_name="Leaf Blight",
        confidence=85.0,
        severity=Severity.HIGH,
        labels=("Leaf", "Plant pathology"),
        tags=("plant",),
        condition="Leaf Blight",
        sources=("plantId",),
    )
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    report = build_report(
        finding,
        make_image(filename="leaf.png"),
        metrics=METRICS,
        services={"plantId": True},
        elapsed_seconds=1.26,
        rng=random.Random(1),
        now=now,
    )
    assert report.disease == "Leaf Blight"
    assert report.confidence == 85
    assert report.severity == "High"
    assert "Apply copper-based fungicide" in report.treatments
    assert report.pathogenIdentification.strain == "US-23"
    assert report.treatmentEfficacy.copperBasedFungicide == 95
    assert report.economicImpact.netSavings == 2750
    assert report.technicalMetrics.imageQualityScore == 85
    assert report.technicalMetrics.agriculturalKeywords == ["Leaf", "Plant pathology", "plant"]
    assert report.imageMetadata.dimensions == "64x48"
    assert report.imageMetadata.format == "PNG"
    assert report.processingTime == "1.3"
    assert report.timestamp == "2024-05-01T12:00:00.000Z"
    assert re.fullmatch(r"ANALYSIS_1714564800000_[0-9a-z]{9}", report.analysisId)


def test_report_is_immutable():
    finding = NormalizedFinding(disease_name="Unknown Disease", confidence=0)
    report = build_report(finding, make_image(), metrics=METRICS)
    with pytest.raises(ValidationError):
        report.disease = "Rust"


def test_synthetic_metrics_are_bounded_and_seedable():
    image = make_image(data=b"not an image", filename="x.jpg")
    first = asyncio.run(SyntheticMetricsProvider(random.Random(3)).invoke(image))
    second = asyncio.run(SyntheticMetricsProvider(random.Random(3)).invoke(image))
    assert first.status == "success"
    assert first.payload == second.payload

    metrics = first.payload
    assert DATA_POINTS_RANGE[0] <= metrics.data_points_analyzed <= DATA_POINTS_RANGE[1]
    assert SIMILAR_CASES_RANGE[0] <= metrics.similar_cases_found <= SIMILAR_CASES_RANGE[1]
    assert TREATMENT_SUCCESS_RANGE[0] <= metrics.treatment_success_rate <= TREATMENT_SUCCESS_RANGE[1]
    assert COMPRESSION_RANGE[0] <= metrics.compression <= COMPRESSION_RANGE[1]
    assert 1.5 <= metrics.processing_speed <= 3.5
    assert 800 <= metrics.width <= 1799


def test_synthetic_metrics_read_real_dimensions():
    outcome = asyncio.run(SyntheticMetricsProvider(random.Random(0)).invoke(make_image()))
    assert (outcome.payload.width, outcome.payload.height) == (64, 48)
