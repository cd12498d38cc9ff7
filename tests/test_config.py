import random

import pytest

from agriscan.pipeline import plan_providers
from agriscan.pipeline.validator import ImageValidationError, build_image_input, parse_coordinates

from conftest import make_settings


def test_gemini_keys_parsing():
    settings = make_settings(gemini_api_keys="key-one  # primary\n\nkey-two,key-three")
    assert settings.gemini_keys() == ["key-one", "key-two", "key-three"]
    assert make_settings(gemini_api_key="solo").gemini_keys() == ["solo"]
    assert make_settings().gemini_keys() == []


def test_plan_follows_configured_credentials():
    settings = make_settings(
        google_vision_api_key="g",
        plant_id_api_key="p",
        groq_api_key="q",
        gemini_api_key="m",
        azure_vision_endpoint="https://example.cognitiveservices.azure.com",
        azure_vision_key="a",
        openweather_api_key="w",
        open_meteo_fallback=True,
    )
    plan = plan_providers(settings, client=None)
    assert [a.name for a in plan.labels] == ["googleVision"]
    assert [a.name for a in plan.tags] == ["azureVision"]
    assert [a.name for a in plan.health_chain] == ["plantId", "groq", "gemini"]
    assert [a.name for a in plan.weather_chain] == ["openWeatherMap", "openMeteo"]


def test_azure_needs_endpoint_and_key():
    plan = plan_providers(make_settings(azure_vision_key="a"), client=None)
    assert plan.tags == []
    assert plan.active() == []


def test_synthetic_seed_makes_filler_repeatable():
    first = plan_providers(make_settings(synthetic_seed=11), client=None).synthetic.draw()
    second = plan_providers(make_settings(synthetic_seed=11), client=None).synthetic.draw()
    assert first == second
    explicit = plan_providers(make_settings(), client=None, rng=random.Random(11)).synthetic.draw()
    assert explicit == first


@pytest.mark.parametrize("lat,lng", [
    (None, "10"),
    ("10", ""),
    ("abc", "10"),
    ("91", "10"),
    ("10", "-181"),
])
def test_unusable_coordinates_are_dropped(lat, lng):
    assert parse_coordinates(lat, lng) is None


def test_coordinates_parsed():
    geo = parse_coordinates("-33.9", "151.2")
    assert (geo.latitude, geo.longitude) == (-33.9, 151.2)


def test_build_image_input_validation():
    with pytest.raises(ImageValidationError, match="No image provided"):
        build_image_input(None, "image/png", "a.png")
    with pytest.raises(ImageValidationError, match="Invalid file type"):
        build_image_input(b"x", "application/pdf", "a.pdf")
    with pytest.raises(ImageValidationError, match="smaller than 1MB"):
        build_image_input(b"x" * 2048, "image/png", "a.png", max_bytes=1024)

    image = build_image_input(b"x" * 10, "image/jpeg", None)
    assert image.filename == "upload"
    assert image.size == 10
