"""Closed set of icons an organization allows on its events."""

from collections.abc import Iterable
from dataclasses import dataclass

from client_timeline.domain.exceptions import UnknownIconError, ValidationException

MAX_ICON_LENGTH = 10

DEFAULT_ICONS: tuple[str, ...] = (
    "💬",  # message
    "📅",  # appointment
    "📄",  # invoice
    "📞",  # call
    "✅",  # paid
    "🤝",  # agreement
    "⚠️",  # important
    "👨‍🔧",  # technician
    "📋",  # placeholder
)


@dataclass(frozen=True)
class IconSet:
    """
    Validated, immutable set of icons.

    Organizations configure their own icons; the set is built once when the
    timeline is opened so event validation never sees free-form strings.
    """

    icons: frozenset[str]

    def __post_init__(self) -> None:
        if not self.icons:
            raise ValidationException("Icon set cannot be empty", field="icons")
        for icon in self.icons:
            if not icon or len(icon) > MAX_ICON_LENGTH:
                raise ValidationException(f"Invalid icon: {icon!r}", field="icons")

    @classmethod
    def from_config(cls, icons: Iterable[str]) -> "IconSet":
        """Build an icon set from organization configuration"""
        return cls(frozenset(icon.strip() for icon in icons if icon and icon.strip()))

    @classmethod
    def default(cls) -> "IconSet":
        return cls(frozenset(DEFAULT_ICONS))

    def __contains__(self, icon: object) -> bool:
        return icon in self.icons

    def validate(self, icon: str) -> str:
        """Return the icon if it belongs to the set"""
        icon = icon.strip()
        if icon not in self.icons:
            raise UnknownIconError(icon)
        return icon
