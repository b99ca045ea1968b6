"""Saved calendar preferences (region and view)."""
from dataclasses import dataclass
from typing import Mapping, MutableMapping

from layout.view_range import VIEW_TYPES, VIEW_WEEK

REGION_KEY = 'vatsim-region'
VIEW_KEY = 'vatsim-view'

REGION_OPTIONS = ('EMEA', 'AMAS', 'APAC', 'all')
DEFAULT_REGION = 'EMEA'
DEFAULT_VIEW = VIEW_WEEK


@dataclass
class Preferences:
    region: str = DEFAULT_REGION
    view: str = DEFAULT_VIEW


def load_preferences(store: Mapping[str, str]) -> Preferences:
    """
    Read preferences from a key/value store, ignoring invalid values.

    Args:
        store: Mapping of saved values, e.g. browser local storage

    Returns:
        Preferences with defaults for anything missing or invalid
    """
    region = store.get(REGION_KEY)
    view = store.get(VIEW_KEY)
    return Preferences(
        region=region if region in REGION_OPTIONS else DEFAULT_REGION,
        view=view if view in VIEW_TYPES else DEFAULT_VIEW
    )


def save_region(store: MutableMapping[str, str], region: str) -> None:
    if region not in REGION_OPTIONS:
        raise ValueError(f"Unknown region: {region}")
    store[REGION_KEY] = region


def save_view(store: MutableMapping[str, str], view: str) -> None:
    if view not in VIEW_TYPES:
        raise ValueError(f"Unknown view: {view}")
    store[VIEW_KEY] = view
