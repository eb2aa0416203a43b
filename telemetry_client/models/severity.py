"""Error severity data models."""

from enum import Enum, IntEnum
from typing import FrozenSet, Union


class Severity(IntEnum):
    """Host error severity codes (bit flags)."""

    ERROR = 1
    WARNING = 2
    PARSE = 4
    NOTICE = 8
    CORE_ERROR = 16
    CORE_WARNING = 32
    COMPILE_ERROR = 64
    COMPILE_WARNING = 128
    USER_ERROR = 256
    USER_WARNING = 512
    USER_NOTICE = 1024
    STRICT = 2048
    RECOVERABLE_ERROR = 4096
    DEPRECATED = 8192
    USER_DEPRECATED = 16384

    @property
    def label(self) -> str:
        """Symbolic name used on the wire (e.g. 'E_ERROR')."""
        return f"E_{self.name}"


# A severity is a known member or the raw code of an unknown one
SeverityCode = Union[Severity, int]

SEVERITY_ALL = 32767

FATAL_SEVERITIES: FrozenSet[Severity] = frozenset({
    Severity.ERROR,
    Severity.PARSE,
    Severity.CORE_ERROR,
    Severity.COMPILE_ERROR,
})

# Severities captured outside debug mode
IMPORTANT_SEVERITIES_MASK = (
    Severity.ERROR
    | Severity.PARSE
    | Severity.CORE_ERROR
    | Severity.COMPILE_ERROR
    | Severity.USER_ERROR
    | Severity.RECOVERABLE_ERROR
)

# Severities captured in debug mode
DEBUG_SEVERITIES_MASK = SEVERITY_ALL & ~Severity.DEPRECATED & ~Severity.STRICT


def resolve_severity(code: int) -> SeverityCode:
    """
    Map a raw severity code to its enumeration member.
    
    Unknown codes are returned unchanged so they are never dropped.
    """
    try:
        return Severity(code)
    except ValueError:
        return int(code)


def severity_label(severity: SeverityCode) -> Union[str, int]:
    """Return the wire form of a severity: its label, or the raw code."""
    if isinstance(severity, Severity):
        return severity.label
    return severity


def is_fatal(severity: SeverityCode) -> bool:
    """Check whether a severity belongs to the fatal tier."""
    return isinstance(severity, Severity) and severity in FATAL_SEVERITIES


class ComponentKind(str, Enum):
    """Kind of component an error originated from."""

    CORE = "core"
    PLUGIN = "plugin"
    THEME = "theme"
