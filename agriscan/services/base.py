"""
Common adapter contract.

``invoke`` never raises (apart from cancellation): transport errors, non-2xx
responses and malformed payloads all come back as a ``ProviderFailure``.
Subclasses implement ``fetch`` (the network call, returning vendor JSON) and
``parse`` (vendor JSON -> payload model).
"""
import json
import logging
import time
from typing import Any, Dict, Optional

import httpx

from ..schemas import GeoCoordinates, ImageInput, ProviderFailure, ProviderSuccess

logger = logging.getLogger(__name__)


class ProviderAdapter:
    name: str = "provider"
    requires_geo: bool = False

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def fetch(self, image: ImageInput, geo: Optional[GeoCoordinates] = None) -> Any:
        raise NotImplementedError

    def parse(self, raw: Any):
        raise NotImplementedError

    async def invoke(self, image: ImageInput, geo: Optional[GeoCoordinates] = None):
        started = time.perf_counter()
        try:
            if self.requires_geo and geo is None:
                raise ValueError("coordinates required")
            raw = await self.fetch(image, geo)
            payload = self.parse(raw)
        except httpx.HTTPStatusError as e:
            return self._failure(f"HTTP {e.response.status_code} from {self.name}", started)
        except httpx.HTTPError as e:
            return self._failure(f"{type(e).__name__}: {e}", started)
        except Exception as e:
            return self._failure(f"Invalid response: {e}", started)
        return ProviderSuccess(
            provider=self.name,
            payload=payload,
            raw=raw,
            latency_ms=_elapsed_ms(started),
        )

    def _failure(self, reason: str, started: float) -> ProviderFailure:
        logger.warning("[%s] provider failed: %s", self.name, reason)
        return ProviderFailure(provider=self.name, reason=reason, latency_ms=_elapsed_ms(started))


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def extract_first_json_object(content: str) -> Dict[str, Any]:
    """Extract and parse the first JSON object from a text blob.

    Handles replies where a JSON object is followed by extra prose, and
    strips Markdown code fences.
    """
    txt = (content or "").strip()
    if txt.startswith("```json"):
        txt = txt[7:]
    if txt.startswith("```"):
        txt = txt[3:]
    if txt.endswith("```"):
        txt = txt[:-3]
    txt = txt.strip()

    try:
        data = json.loads(txt)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    start = txt.find("{")
    if start == -1:
        raise ValueError("No JSON object start found")
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(txt)):
        ch = txt[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return json.loads(txt[start:i + 1])
    raise ValueError("No complete JSON object found")
