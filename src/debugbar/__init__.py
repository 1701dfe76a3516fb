"""debugbar: an in-process request profiling toolbar for ASGI applications.

During one request the toolbar gathers timing, memory and contextual data
from pluggable collectors, stores the merged snapshot, and renders it on
demand as HTML, JSON or XML.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
