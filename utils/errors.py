"""Structured error types for the Lighthouse score tracker."""

class AuditError(Exception):
    """Base exception for audit errors."""
    pass

class ConfigError(AuditError):
    """Error for invalid input (URL config, settings, engine names)."""
    pass

class BaselineNotFound(AuditError):
    """No previous report exists for a URL/device. Expected, not fatal."""
    def __init__(self, path, message: str = ""):
        self.path = path
        super().__init__(message or f"No baseline report at '{path}'")

class StorageError(AuditError):
    """Error reading or writing the results tree."""
    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"Storage '{path}': {message}")

class AuditEngineError(AuditError):
    """Error raised by the audit engine while auditing a page."""
    def __init__(self, url: str, device: str, message: str):
        self.url = url
        self.device = device
        super().__init__(f"Audit of '{url}' ({device}): {message}")


class BrowserLaunchError(AuditEngineError):
    """Headless browser could not be started for an audit."""
    def __init__(self, reason: str, url: str = "", device: str = ""):
        self.reason = reason
        self.url = url
        self.device = device
        if url:
            AuditError.__init__(self, f"Browser launch for '{url}' ({device}) failed: {reason}")
        else:
            AuditError.__init__(self, f"Browser launch failed: {reason}")
