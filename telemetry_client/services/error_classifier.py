"""
Error Classifier component.

Turns a raw error signal (severity code, message, file, line) into an
immutable ErrorRecord: resolves the severity, makes the file path portable,
attributes the error to core, a plugin or a theme, and attaches the request
and reporting context.
"""

from typing import Callable, Optional, Tuple

from telemetry_client.config import Settings, settings as default_settings
from telemetry_client.models.error import (
    ErrorContext,
    ErrorRecord,
    OriginatingComponent,
    RequestContext,
)
from telemetry_client.models.severity import (
    DEBUG_SEVERITIES_MASK,
    IMPORTANT_SEVERITIES_MASK,
    ComponentKind,
    Severity,
    SeverityCode,
    is_fatal,
    resolve_severity,
)
from telemetry_client.services.probes import Clock, SystemClock

# Ordered: the first kind whose segment appears in the path wins
_COMPONENT_SEGMENTS: Tuple[Tuple[str, ComponentKind], ...] = (
    ("plugins", ComponentKind.PLUGIN),
    ("themes", ComponentKind.THEME),
)


def normalize_path(path: str) -> str:
    """Use forward slashes and collapse duplicate separators."""
    path = path.replace("\\", "/")
    while "//" in path:
        path = path.replace("//", "/")
    return path


class ErrorClassifier:
    """Classifies raw error signals into ErrorRecords."""
    
    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        context_provider: Optional[Callable[[], RequestContext]] = None,
    ):
        """
        Initialize the classifier.
        
        Args:
            settings: Reporting configuration (debug flag, reporting level, root path)
            clock: Clock used to timestamp records
            context_provider: Returns the current request context
        """
        self.settings = settings or default_settings
        self.clock = clock or SystemClock()
        self.context_provider = context_provider or RequestContext
        
        root = self.settings.root_path
        self._root_prefix = normalize_path(root).rstrip("/") + "/" if root else None
    
    @property
    def capture_mask(self) -> int:
        """Severities captured at all, depending on debug mode."""
        if self.settings.debug:
            return DEBUG_SEVERITIES_MASK
        return IMPORTANT_SEVERITIES_MASK
    
    def should_report(self, severity_code: int) -> bool:
        """
        Check whether an error of this severity is recorded.
        
        A known code must intersect both the capture mask and the configured
        reporting level. Unknown codes are always reported with their raw value.
        """
        severity = resolve_severity(severity_code)
        if not isinstance(severity, Severity):
            return True
        return bool(severity & self.capture_mask & self.settings.reporting_level)
    
    def is_fatal(self, severity: SeverityCode) -> bool:
        return is_fatal(severity)
    
    def relative_path(self, file_path: str) -> str:
        """
        Strip the configured root path from a file path.
        
        Paths outside the root are returned normalized but otherwise unchanged.
        """
        path = normalize_path(file_path or "")
        if self._root_prefix and path.startswith(self._root_prefix):
            path = path[len(self._root_prefix):]
        return path
    
    def detect_source(self, relative_path: str) -> OriginatingComponent:
        """
        Attribute a path to a plugin, a theme, or core.
        
        A component segment with nothing after it (e.g. 'plugins/') falls
        back to core without consulting later kinds.
        
        Args:
            relative_path: Portable path produced by relative_path()
            
        Returns:
            OriginatingComponent for the path
        """
        segments = normalize_path(relative_path).split("/")
        
        for marker, kind in _COMPONENT_SEGMENTS:
            # Only a segment followed by a separator counts as a match
            if marker not in segments[:-1]:
                continue
            identifier = segments[segments.index(marker) + 1]
            if identifier:
                return OriginatingComponent(kind=kind, identifier=identifier)
            break
        
        return OriginatingComponent(kind=ComponentKind.CORE, identifier=self.settings.platform_name)
    
    def classify(self, severity_code: int, message: str, file_path: str, line: int) -> ErrorRecord:
        """
        Build an ErrorRecord from a raw error signal.
        
        Args:
            severity_code: Raw severity code; unknown codes are kept verbatim
            message: Error message
            file_path: Absolute or relative path of the raising file
            line: Line number in that file
            
        Returns:
            Immutable ErrorRecord
        """
        source_file = self.relative_path(file_path)
        request = self.context_provider()
        
        return ErrorRecord(
            severity=resolve_severity(severity_code),
            message=str(message),
            source_file=source_file,
            line=int(line or 0),
            timestamp=self.clock.wall_time(),
            originating_component=self.detect_source(source_file),
            context=ErrorContext(
                actor_id=request.actor_id,
                request_path=request.request_path,
                debug_mode=self.settings.debug,
                reporting_level=self.settings.reporting_level,
            ),
        )
