"""
Localization.

English is always loaded as the base table; a translation overrides the
keys it defines, so untranslated strings show up in English.
"""

import importlib
import logging
from typing import Dict

logger = logging.getLogger(__name__)

# Language code -> native language name
LANGUAGES: Dict[str, str] = {
    "ca": "Català",
    "cs": "Čeština",
    "de": "Deutsch",
    "el": "Ελληνικά",
    "en": "English",
    "es": "Español",
    "eu": "Euskera",
    "fi": "Suomi",
    "fr": "Français",
    "hu": "Magyar",
    "it": "Italiano",
    "pl": "Polski",
    "pt-br": "Português (Br)",
    "ru": "Русский",
    "sk": "Slovenčina",
}


def _load_table(lang: str) -> Dict[str, str]:
    module_name = "tracklog.app.locales." + lang.replace("-", "_")
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError:
        logger.debug("No translation table for %s", lang)
        return {}
    return module.STRINGS


def get_strings(lang: str) -> Dict[str, str]:
    strings = dict(_load_table("en"))
    if lang != "en" and lang in LANGUAGES:
        strings.update(_load_table(lang))
    return strings
