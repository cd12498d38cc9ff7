"""
Synthetic metrics.

Technical metrics and image details that no upstream service measures are
filled with bounded random values. This is placeholder data, labelled as
such in the report; pass a seeded ``random.Random`` to make it repeatable.
Image dimensions are read from the bytes when Pillow can decode them.
"""
import random
from io import BytesIO
from typing import Any, Dict, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..schemas import GeoCoordinates, ImageInput, SyntheticMetrics
from .base import ProviderAdapter

# Inclusive ranges for integer filler
DATA_POINTS_RANGE = (1000, 2999)
SIMILAR_CASES_RANGE = (500, 1499)
TREATMENT_SUCCESS_RANGE = (70, 99)
WIDTH_RANGE = (800, 1799)
HEIGHT_RANGE = (600, 1599)
COMPRESSION_RANGE = (70, 99)
PROCESSING_SPEED_RANGE = (1.5, 3.5)


def read_dimensions(data: bytes) -> Optional[Tuple[int, int]]:
    try:
        with Image.open(BytesIO(data)) as img:
            return img.size
    except (UnidentifiedImageError, OSError, ValueError):
        return None


class SyntheticMetricsProvider(ProviderAdapter):
    name = "synthetic"

    def __init__(self, rng: Optional[random.Random] = None):
        super().__init__(client=None)
        self.rng = rng or random.Random()

    def draw(self, dims: Optional[Tuple[int, int]] = None) -> Dict[str, Any]:
        rng = self.rng
        if dims is None:
            dims = (rng.randint(*WIDTH_RANGE), rng.randint(*HEIGHT_RANGE))
        return {
            "processing_speed": round(rng.uniform(*PROCESSING_SPEED_RANGE), 2),
            "data_points_analyzed": rng.randint(*DATA_POINTS_RANGE),
            "similar_cases_found": rng.randint(*SIMILAR_CASES_RANGE),
            "treatment_success_rate": rng.randint(*TREATMENT_SUCCESS_RANGE),
            "width": dims[0],
            "height": dims[1],
            "compression": rng.randint(*COMPRESSION_RANGE),
        }

    async def fetch(self, image: ImageInput, geo: Optional[GeoCoordinates] = None) -> Dict[str, Any]:
        return self.draw(read_dimensions(image.data))

    def parse(self, raw: Dict[str, Any]) -> SyntheticMetrics:
        return SyntheticMetrics(**raw)
