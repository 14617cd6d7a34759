from .plant import PlantPayloadFactory
from .care_log import CareLogPayloadFactory, FeedingLogPayloadFactory, WateringLogPayloadFactory
from .repository import InMemoryPlantRepository

__all__ = [
    "InMemoryPlantRepository",
    "PlantPayloadFactory",
    "CareLogPayloadFactory",
    "WateringLogPayloadFactory",
    "FeedingLogPayloadFactory",
]
