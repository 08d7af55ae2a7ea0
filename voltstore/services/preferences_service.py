"""
Preferences service.

Stores the active storefront language in the durable state store. The
display currency follows the language.
"""

import logging

from voltstore.schemas.configuration import Language
from voltstore.services.storage import LocalStateStore
from voltstore.utils.constants import STORAGE_KEYS

logger = logging.getLogger(__name__)


def get_active_language(store: LocalStateStore) -> Language:
    """Persisted language, English when unset or unknown."""
    saved = store.get(STORAGE_KEYS['LANGUAGE'])
    try:
        return Language(saved)
    except ValueError:
        if saved is not None:
            logger.warning(f"Ignoring unknown persisted language {saved!r}")
        return Language.EN


def set_active_language(store: LocalStateStore, language: Language) -> Language:
    store.set(STORAGE_KEYS['LANGUAGE'], language.value)
    logger.info(f"Active language set to {language.value}")
    return language
