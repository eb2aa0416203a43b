"""Host bindings for the telemetry client."""

from telemetry_client.integrations.python_host import (
    PythonHostBinding,
    TelemetryLogHandler,
    install_python_host,
)

__all__ = ["PythonHostBinding", "TelemetryLogHandler", "install_python_host"]
