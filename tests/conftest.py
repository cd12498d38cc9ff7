import asyncio
import json
import random
from io import BytesIO
from typing import Callable, Dict, List, Optional

import httpx
import pytest
from PIL import Image

from agriscan.config import Settings
from agriscan.schemas import ImageInput
from agriscan.services.base import ProviderAdapter

NO_PROVIDERS = dict(
    google_vision_api_key=None,
    plant_id_api_key=None,
    azure_vision_endpoint=None,
    azure_vision_key=None,
    groq_api_key=None,
    gemini_api_keys=None,
    gemini_api_key=None,
    openweather_api_key=None,
    open_meteo_fallback=False,
)


def make_settings(**overrides) -> Settings:
    values = dict(NO_PROVIDERS, synthetic_seed=7)
    values.update(overrides)
    return Settings(_env_file=None, **values)


def png_bytes(width: int = 64, height: int = 48) -> bytes:
    buf = BytesIO()
    Image.new("RGB", (width, height), (40, 160, 60)).save(buf, format="PNG")
    return buf.getvalue()


def make_image(data: Optional[bytes] = None, filename: str = "leaf.png") -> ImageInput:
    data = png_bytes() if data is None else data
    return ImageInput(data=data, content_type="image/png", size=len(data), filename=filename)


class Router:
    """MockTransport handler that answers by host and records every request."""

    def __init__(self, routes: Optional[Dict[str, Callable[[httpx.Request], httpx.Response]]] = None):
        self.routes = routes or {}
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.host)
        if handler is None:
            return httpx.Response(404, json={"error": "no route"})
        return handler(request)

    def hosts(self) -> List[str]:
        return [r.url.host for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def json_response(payload, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(status_code, json=payload)


def groq_reply(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


DIAGNOSIS_JSON = json.dumps({
    "diagnosis": "Powdery Mildew",
    "confidence": 0.5,
    "isHealthy": False,
    "symptoms": ["white powder on leaves"],
})


class StubAdapter(ProviderAdapter):
    """In-memory adapter with optional delay and failure."""

    def __init__(self, name: str, parse_fn=None, raw=None, delay: float = 0.0, error: Optional[Exception] = None):
        super().__init__(client=None)
        self.name = name
        self.parse_fn = parse_fn
        self.raw = raw if raw is not None else {}
        self.delay = delay
        self.error = error
        self.calls = 0

    async def fetch(self, image, geo=None):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.raw

    def parse(self, raw):
        return self.parse_fn(raw)


@pytest.fixture
def image() -> ImageInput:
    return make_image()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)
