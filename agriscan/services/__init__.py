"""Provider adapters: one per external capability."""
from .azure_vision import AzureVisionAdapter
from .base import ProviderAdapter
from .chat_vision import GeminiVisionAdapter, GroqVisionAdapter
from .google_vision import GoogleVisionAdapter
from .plant_id import PlantIdAdapter
from .synthetic import SyntheticMetricsProvider
from .weather import OpenMeteoAdapter, OpenWeatherMapAdapter

__all__ = [
    'ProviderAdapter',
    'GoogleVisionAdapter',
    'PlantIdAdapter',
    'AzureVisionAdapter',
    'GroqVisionAdapter',
    'GeminiVisionAdapter',
    'OpenWeatherMapAdapter',
    'OpenMeteoAdapter',
    'SyntheticMetricsProvider',
]
