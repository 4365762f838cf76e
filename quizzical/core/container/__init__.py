__all__ = [
    "BootConfiguration",
    "OverrideContainer",
    "QuizzicalContainer",
    "StorageContainer",
]

from .override import OverrideContainer
from .quizzical import BootConfiguration, QuizzicalContainer
from .storage import StorageContainer
