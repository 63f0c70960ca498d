from agronomy.knowledge.crop_database import (
    CropKnowledgeBase,
    CropProfile,
    DEFAULT_CROP_PROFILES,
)
from agronomy.knowledge.locations import (
    DEFAULT_LOCATION_ADJUSTMENTS,
    LocationAdjustment,
    LocationTable,
)

__all__ = [
    "CropKnowledgeBase",
    "CropProfile",
    "DEFAULT_CROP_PROFILES",
    "DEFAULT_LOCATION_ADJUSTMENTS",
    "LocationAdjustment",
    "LocationTable",
]
