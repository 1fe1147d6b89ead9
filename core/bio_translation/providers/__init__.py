"""Translation Providers Package"""

from .base import AUTO_DETECT, TranslationProvider, classify_status
from .libretranslate import LibreTranslateProvider
from .mymemory import MyMemoryProvider, QUOTA_MARKER

__all__ = [
    "AUTO_DETECT",
    "TranslationProvider",
    "classify_status",
    "LibreTranslateProvider",
    "MyMemoryProvider",
    "QUOTA_MARKER",
]
