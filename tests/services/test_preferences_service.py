"""
Tests for the persisted storefront language.
"""

from voltstore.schemas.configuration import Language
from voltstore.services.preferences_service import get_active_language, set_active_language
from voltstore.utils.constants import STORAGE_KEYS


def test_defaults_to_english(state_store):
    assert get_active_language(state_store) == Language.EN


def test_set_and_get(state_store):
    set_active_language(state_store, Language.SV)

    assert get_active_language(state_store) == Language.SV
    assert state_store.get(STORAGE_KEYS['LANGUAGE']) == "sv"


def test_unknown_persisted_value_is_ignored(state_store):
    state_store.set(STORAGE_KEYS['LANGUAGE'], "klingon")

    assert get_active_language(state_store) == Language.EN
