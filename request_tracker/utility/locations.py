from __future__ import annotations

from .settings import DEFAULT_SETTINGS, TrackerSettings


def normalize_location(raw: object, settings: TrackerSettings = DEFAULT_SETTINGS) -> str:
    """Map a raw or legacy site label onto its canonical short label.

    Unknown labels are returned trimmed; an empty result means "unspecified".
    """
    if not isinstance(raw, str):
        return ""
    label = raw.strip()
    if not label:
        return ""
    return settings.legacy_locations.get(label, label)


def is_known_location(raw: object, settings: TrackerSettings = DEFAULT_SETTINGS) -> bool:
    return settings.is_canonical_location(normalize_location(raw, settings))
