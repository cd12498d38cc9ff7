"""
Data model for the analysis pipeline.

Provider payloads are a closed set of shapes tagged by ``kind``; every
adapter reduces its vendor JSON to one of them before the merger sees it.
Report sections keep the camelCase names of the JSON contract.
"""
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class ImageInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    content_type: str
    size: int
    filename: str


class GeoCoordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


# --- Provider payloads ---

class VisionLabel(BaseModel):
    description: str
    confidence: float = 0.0


class LabelPayload(BaseModel):
    kind: Literal["labels"] = "labels"
    labels: List[VisionLabel] = Field(default_factory=list)


class HealthAssessment(BaseModel):
    disease: Optional[str] = None
    probability: float


class SpeciesSuggestion(BaseModel):
    name: str
    probability: float


class PlantHealthPayload(BaseModel):
    kind: Literal["plant_health"] = "plant_health"
    health: Optional[HealthAssessment] = None
    suggestions: List[SpeciesSuggestion] = Field(default_factory=list)


class VisionTag(BaseModel):
    name: str
    confidence: float = 0.0


class TagPayload(BaseModel):
    kind: Literal["tags"] = "tags"
    tags: List[VisionTag] = Field(default_factory=list)


class ChatVisionPayload(BaseModel):
    kind: Literal["chat_vision"] = "chat_vision"
    diagnosis: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    is_healthy: bool = False
    symptoms: List[str] = Field(default_factory=list)


class WeatherSnapshot(BaseModel):
    kind: Literal["weather"] = Field("weather", exclude=True)
    temperature: float
    humidity: float
    description: str = ""
    windSpeed: float = 0.0
    source: str = "unknown"


class SyntheticMetrics(BaseModel):
    """Placeholder measurements with no real source behind them."""

    kind: Literal["synthetic"] = "synthetic"
    processing_speed: float
    data_points_analyzed: int
    similar_cases_found: int
    treatment_success_rate: int
    width: int
    height: int
    compression: int


ProviderPayload = Annotated[
    Union[LabelPayload, PlantHealthPayload, TagPayload, ChatVisionPayload, WeatherSnapshot, SyntheticMetrics],
    Field(discriminator="kind"),
]


class ProviderSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    provider: str
    payload: ProviderPayload
    raw: Optional[Any] = None
    latency_ms: float = 0.0


class ProviderFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    provider: str
    reason: str
    latency_ms: float = 0.0


ProviderOutcome = Annotated[Union[ProviderSuccess, ProviderFailure], Field(discriminator="status")]


class NormalizedFinding(BaseModel):
    model_config = ConfigDict(frozen=True)

    disease_name: str
    confidence: float = Field(..., ge=0.0, le=100.0)
    severity: Severity = Severity.LOW
    labels: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    # Disease string reported by the health signal; None when healthy or absent
    condition: Optional[str] = None
    # Symptoms described by a chat-vision diagnosis, if that was the health signal
    observed_symptoms: Tuple[str, ...] = ()
    sources: Tuple[str, ...] = ()


# --- Report sections ---

class TechnicalMetrics(BaseModel):
    imageQualityScore: int
    agriculturalKeywords: List[str] = []
    processingSpeed: float
    modelConfidence: float
    dataPointsAnalyzed: int
    similarCasesFound: int
    treatmentSuccessRate: int


class PathogenInfo(BaseModel):
    species: str
    strain: str
    matingType: str
    resistanceProfile: str


class EnvironmentalAnalysis(BaseModel):
    temperatureFavorability: str
    humidityImpact: str
    soilPHCompatibility: str
    airCirculation: str


class TreatmentEfficacy(BaseModel):
    copperBasedFungicide: int
    biologicalControl: int
    culturalPractices: int
    preventionMeasures: int


class RegionalPrevalence(BaseModel):
    southeastAsia: str
    northAmerica: str
    europe: str


class Epidemiology(BaseModel):
    firstReported: int
    globalCases: str
    seasonalPeak: str
    geographicSpread: str
    regionalPrevalence: RegionalPrevalence


class InsuranceInfo(BaseModel):
    cropInsuranceCoverage: str = "Available"
    riskLevel: str
    preventionCredit: str = "Eligible"


class EconomicImpact(BaseModel):
    potentialLoss: int
    treatmentCost: int
    netSavings: int
    roi: float
    insurance: InsuranceInfo


class CurrentConditions(BaseModel):
    temperature: float
    humidity: float
    rainfall: float
    windSpeed: float


class ForecastDay(BaseModel):
    day: str
    temp: float
    humidity: float


class WeatherAnalysis(BaseModel):
    currentConditions: CurrentConditions
    diseaseFavorability: int
    forecast: List[ForecastDay]
    source: str = "synthetic"


class ImageMetadata(BaseModel):
    size: int
    dimensions: str
    format: str
    compression: int


class ProviderTrace(BaseModel):
    name: str
    status: str
    latencyMs: float
    reason: Optional[str] = None


class DiagnosticReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    disease: str
    confidence: int
    severity: Severity
    symptoms: List[str]
    treatments: List[str]
    prevention: List[str]
    imageLabels: List[str] = []
    imageTags: List[str] = []
    technicalMetrics: TechnicalMetrics
    pathogenIdentification: PathogenInfo
    environmentalAnalysis: EnvironmentalAnalysis
    treatmentEfficacy: TreatmentEfficacy
    epidemiology: Epidemiology
    economicImpact: EconomicImpact
    weatherAnalysis: WeatherAnalysis
    timestamp: str
    filename: str
    analysisId: str
    processingTime: str
    imageMetadata: ImageMetadata
    aiServices: Dict[str, bool]
    providers: List[ProviderTrace] = []
    warnings: List[str] = []


class AnalysisData(BaseModel):
    analysis: DiagnosticReport
    rawData: Dict[str, Optional[Any]]


class AnalyzeResponse(BaseModel):
    success: bool = True
    data: AnalysisData


class ErrorResponse(BaseModel):
    error: str
