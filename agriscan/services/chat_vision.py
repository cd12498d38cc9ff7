"""
Chat-vision diagnosis via Groq (OpenAI-compatible) or Google Gemini.

Both models are asked for one strict JSON object with the same schema; the
reply text is reduced to a ``ChatVisionPayload``. They sit behind Plant.id
in the health chain and act as the disease signal when it is unavailable.
"""
import base64
from typing import Any, Dict, Optional

from ..schemas import ChatVisionPayload, GeoCoordinates, ImageInput
from .base import ProviderAdapter, extract_first_json_object

GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"
GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

DIAGNOSIS_PROMPT = """
You are an expert plant pathologist. Analyze the provided leaf/plant image and RETURN EXACTLY ONE STRICT JSON OBJECT (parsable by json.loads()). Do not output any extra text, commentary or code fences.

Required keys:
- `diagnosis` (string): short disease/pest name, or "Healthy" when no disease is visible, or "Unknown".
- `confidence` (float 0.0-1.0): calibrated certainty of the diagnosis.
- `isHealthy` (bool).
- `symptoms` (array of short strings).

If image quality is poor, use a conservative `confidence` below 0.6.

Example valid output:
{"diagnosis":"Early blight","confidence":0.78,"isHealthy":false,"symptoms":["brown concentric lesions","leaf yellowing"]}
"""


def parse_diagnosis_text(content: str) -> ChatVisionPayload:
    data = extract_first_json_object(content)
    diagnosis = data.get("diagnosis") or data.get("disease") or "Unknown"
    try:
        confidence = float(data.get("confidence", 0.5))
    except (TypeError, ValueError):
        confidence = 0.5
    confidence = min(max(confidence, 0.0), 1.0)

    symptoms = data.get("symptoms") or data.get("observations") or []
    return ChatVisionPayload(
        diagnosis=str(diagnosis),
        confidence=confidence,
        is_healthy=bool(data.get("isHealthy", data.get("is_healthy", False))),
        symptoms=[str(s) for s in symptoms],
    )


def parse_groq_response(raw: Dict[str, Any]) -> ChatVisionPayload:
    choices = raw.get("choices") or []
    if not choices:
        raise ValueError("No response choices")
    content = (choices[0].get("message") or {}).get("content") or ""
    if not content:
        raise ValueError("Empty content in Groq response")
    return parse_diagnosis_text(content)


def parse_gemini_response(raw: Dict[str, Any]) -> ChatVisionPayload:
    candidates = raw.get("candidates") or []
    if not candidates:
        raise ValueError("No response candidates")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts:
        raise ValueError("No response parts")
    return parse_diagnosis_text(parts[0].get("text", ""))


def _data_url(image: ImageInput) -> str:
    return f"data:{image.content_type};base64,{base64.b64encode(image.data).decode('ascii')}"


class GroqVisionAdapter(ProviderAdapter):
    name = "groq"

    def __init__(self, client, api_key: str, model: str, temperature: float = 0.2, max_tokens: int = 1024):
        super().__init__(client)
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def fetch(self, image: ImageInput, geo: Optional[GeoCoordinates] = None) -> Dict[str, Any]:
        payload = {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": DIAGNOSIS_PROMPT},
                        {"type": "image_url", "image_url": {"url": _data_url(image)}},
                    ],
                }
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        resp = await self.client.post(
            GROQ_API_URL,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        resp.raise_for_status()
        return resp.json()

    def parse(self, raw: Dict[str, Any]) -> ChatVisionPayload:
        return parse_groq_response(raw)


class GeminiVisionAdapter(ProviderAdapter):
    name = "gemini"

    def __init__(self, client, api_key: str, model: str, temperature: float = 0.2):
        super().__init__(client)
        self.api_key = api_key
        self.model = model
        self.temperature = temperature

    async def fetch(self, image: ImageInput, geo: Optional[GeoCoordinates] = None) -> Dict[str, Any]:
        payload = {
            "contents": [
                {
                    "parts": [
                        {"text": DIAGNOSIS_PROMPT},
                        {
                            "inline_data": {
                                "mime_type": image.content_type,
                                "data": base64.b64encode(image.data).decode("ascii"),
                            }
                        },
                    ]
                }
            ],
            "generationConfig": {"temperature": self.temperature},
        }
        resp = await self.client.post(
            GEMINI_API_URL.format(model=self.model),
            json=payload,
            headers={"x-goog-api-key": self.api_key},
        )
        resp.raise_for_status()
        return resp.json()

    def parse(self, raw: Dict[str, Any]) -> ChatVisionPayload:
        return parse_gemini_response(raw)
