"""
Exceptions for plugin feed parsing.

Exception Hierarchy:
- PluginFeedException (base)
  ├── FetchException (source unreachable or non-2xx)
  ├── ParseException (expected markup missing)
  └── ConfigException (invalid configuration)

Fetch and parse errors are recovered inside the parsers; only
configuration errors reach the caller.
"""

from dataclasses import dataclass
from typing import Optional


class PluginFeedException(Exception):
    """Base exception for all plugin feed operations"""

    def __init__(self, message: str, plugin: str = None, details: dict = None):
        self.plugin = plugin
        self.details = details or {}
        super().__init__(message)

    def __str__(self):
        if self.plugin:
            return f"[{self.plugin}] {super().__str__()}"
        return super().__str__()


class FetchException(PluginFeedException):
    """Raised when a source cannot be retrieved"""

    def __init__(self, message: str, plugin: str = None,
                 status_code: int = None, url: str = None, **kwargs):
        self.status_code = status_code
        self.url = url
        details = {'status_code': status_code, 'url': url, **kwargs}
        super().__init__(message, plugin, details)


class ParseException(PluginFeedException):
    """Raised when a source does not have the expected structure"""

    def __init__(self, message: str, plugin: str = None,
                 selector: str = None, **kwargs):
        self.selector = selector
        details = {'selector': selector, **kwargs}
        super().__init__(message, plugin, details)


class ConfigException(PluginFeedException):
    """Raised when configuration is invalid"""

    def __init__(self, message: str, config_key: str = None, **kwargs):
        self.config_key = config_key
        details = {'config_key': config_key, **kwargs}
        super().__init__(message, None, details)


@dataclass
class ParserDiagnostic:
    """User-visible description of an unexpected fault during loading."""
    plugin: str
    message: str
    file: Optional[str] = None
    line: Optional[int] = None
    exception: Optional[BaseException] = None

    @classmethod
    def from_exception(cls, plugin: str, exc: BaseException) -> "ParserDiagnostic":
        """Point at the innermost frame, where the fault was raised."""
        tb = exc.__traceback__
        while tb is not None and tb.tb_next is not None:
            tb = tb.tb_next
        file = tb.tb_frame.f_code.co_filename if tb else None
        line = tb.tb_lineno if tb else None
        return cls(plugin=plugin, message=str(exc) or type(exc).__name__,
                   file=file, line=line, exception=exc)

    def to_html(self) -> str:
        from html import escape

        location = f"{self.file} ({self.line})" if self.file else "unknown"
        return (
            "<h1>Error</h1>"
            f"<p><strong>Plugin:</strong> {escape(self.plugin)}<br />"
            f"<strong>Message:</strong> {escape(self.message)}<br />"
            f"<strong>File:</strong> {escape(location)}</p>"
        )
