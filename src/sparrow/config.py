"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable.
``App.set()`` / ``App.get()`` accept the conventional string keys
(``"views"``, ``"view engine"``) and map them onto these fields, so a
typo raises instead of silently creating a new setting.
"""

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path

from sparrow.errors import ConfigurationError


class FaultPolicy(Enum):
    """What the entry point does when a handler raises.

    ``RESPOND``: log the exception and answer ``500`` if nothing has been
    sent yet, otherwise finish the response that is in flight.

    ``PROPAGATE``: re-raise to the ASGI server.
    """

    RESPOND = "respond"
    PROPAGATE = "propagate"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(views="templates", view_engine="kida", debug=True)
    """

    debug: bool = False

    # Templates
    views: str | Path = "views"
    view_engine: str = "kida"

    # Handler faults
    fault_policy: FaultPolicy = FaultPolicy.RESPOND


_FIELD_NAMES: frozenset[str] = frozenset(f.name for f in fields(AppConfig))

# Conventional setting names -> AppConfig field names
SETTING_ALIASES: dict[str, str] = {
    "views": "views",
    "view engine": "view_engine",
    "fault policy": "fault_policy",
    "debug": "debug",
}


def setting_field(key: str) -> str:
    """Resolve a setting key to its ``AppConfig`` field name.

    Accepts the space-separated conventional names as well as the field
    names themselves. Raises ``ConfigurationError`` for anything else.
    """
    if key in SETTING_ALIASES:
        return SETTING_ALIASES[key]
    if key in _FIELD_NAMES:
        return key
    known = ", ".join(sorted(SETTING_ALIASES))
    msg = f"Unknown setting {key!r}. Known settings: {known}"
    raise ConfigurationError(msg)


def is_setting(key: object) -> bool:
    """True if *key* names a setting (alias or field name)."""
    return isinstance(key, str) and (key in SETTING_ALIASES or key in _FIELD_NAMES)

