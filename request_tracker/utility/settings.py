"""Immutable tracker settings shared by normalization, approvals and the dashboard.

Settings are built once per application (see ``create_app``) and handed to the
pure helpers explicitly, so none of them read module-level mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from flask import current_app, has_app_context

EXTENSION_KEY = "request_tracker"

CANONICAL_LOCATIONS: tuple[str, ...] = (
	"Plant",
	"Short N.",
	"Frantz Rd.",
	"Morse Rd.",
)

# Labels used by older forms and spreadsheet rows. Keys match exactly (case-sensitive).
LEGACY_LOCATION_LABELS: Mapping[str, str] = MappingProxyType(
	{
		"Short North": "Short N.",
		"South Dublin": "Frantz Rd.",
		"Frantz Road": "Frantz Rd.",
		"Morse Road": "Morse Rd.",
	}
)

DEFAULT_APPROVER_EMAILS: frozenset[str] = frozenset(
	{
		"rbrown@dublincleaners.com",
	}
)


class SettingsError(ValueError):
	"""Raised when a settings table would make normalization unstable."""


def _check_legacy_table(table: Mapping[str, str]) -> None:
	for legacy, canonical in table.items():
		target = table.get(canonical)
		if target is not None and target != canonical:
			raise SettingsError(
				f"Legacy label {legacy!r} maps to {canonical!r}, which is itself remapped to {target!r}"
			)


@dataclass(frozen=True)
class TrackerSettings:
	legacy_locations: Mapping[str, str] = field(default_factory=lambda: LEGACY_LOCATION_LABELS)
	canonical_locations: tuple[str, ...] = CANONICAL_LOCATIONS
	approver_emails: frozenset[str] = DEFAULT_APPROVER_EMAILS
	top_n: int = 5

	def __post_init__(self) -> None:
		cleaned = {
			str(k).strip(): str(v).strip()
			for k, v in dict(self.legacy_locations).items()
			if str(k).strip() and str(v).strip()
		}
		_check_legacy_table(cleaned)
		object.__setattr__(self, "legacy_locations", MappingProxyType(cleaned))
		object.__setattr__(self, "canonical_locations", tuple(self.canonical_locations))
		object.__setattr__(
			self,
			"approver_emails",
			frozenset(e.strip().lower() for e in self.approver_emails if e and e.strip()),
		)
		if self.top_n < 1:
			raise SettingsError("top_n must be at least 1")

	def is_approver(self, email: object) -> bool:
		if not isinstance(email, str):
			return False
		return email.strip().lower() in self.approver_emails

	def is_canonical_location(self, label: str) -> bool:
		return label in self.canonical_locations

	@classmethod
	def from_config(cls, config: Mapping[str, object]) -> "TrackerSettings":
		"""Build settings from a Flask config mapping, layering overrides on the defaults."""
		legacy = dict(LEGACY_LOCATION_LABELS)
		legacy.update(config.get("LEGACY_LOCATION_LABELS") or {})

		canonical: Iterable[str] = config.get("CANONICAL_LOCATIONS") or CANONICAL_LOCATIONS
		approvers = set(DEFAULT_APPROVER_EMAILS)
		approvers.update(config.get("APPROVER_EMAILS") or ())

		try:
			top_n = int(config.get("DASHBOARD_TOP_N") or 5)
		except (TypeError, ValueError):
			top_n = 5

		return cls(
			legacy_locations=legacy,
			canonical_locations=tuple(canonical),
			approver_emails=frozenset(approvers),
			top_n=top_n,
		)


DEFAULT_SETTINGS = TrackerSettings()


def get_settings() -> TrackerSettings:
	"""Settings bound to the current app, or the built-in defaults outside an app context."""
	if not has_app_context():
		return DEFAULT_SETTINGS
	settings = current_app.extensions.get(EXTENSION_KEY)
	if settings is None:
		settings = TrackerSettings.from_config(current_app.config)
		current_app.extensions[EXTENSION_KEY] = settings
	return settings


__all__ = [
	"CANONICAL_LOCATIONS",
	"DEFAULT_APPROVER_EMAILS",
	"DEFAULT_SETTINGS",
	"LEGACY_LOCATION_LABELS",
	"SettingsError",
	"TrackerSettings",
	"get_settings",
]
