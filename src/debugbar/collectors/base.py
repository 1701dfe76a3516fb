"""Collector contract and a convenience base class.

Every data source shown as a toolbar tab implements :class:`Collector`.
The snapshot builder asks each collector the same thirteen questions, in
order, exactly once per request. ``get_title`` answers two of them:

====================  =====================================================
``get_title()``        tab title
``get_title(True)``    short title: lower-case, html-safe id
``get_title_details``  short text shown next to the title
``display()``          tab body (markup string or JSON-safe data)
``get_badge_value``    count shown on the tab, or None
``is_empty()``         True when there is nothing to show
``has_tab_content``    whether the collector gets its own tab
``has_label()``        whether the title is shown in the bar
``icon()``             icon reference (data URI or name)
``has_timeline_data``  whether ``timeline_data()`` should be merged
``timeline_data()``    ordered :class:`TimelineEntry` spans
``has_var_data()``     whether ``get_var_data()`` feeds the Vars tab
``get_var_data()``     ``{heading: {key: value}}``
====================  =====================================================

Collectors must answer without side effects on other collectors. A
collector that declares timeline data may still return an empty list.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from debugbar.core.contracts.timeline import TimelineEntry
from debugbar.core.scope import RequestScope
from debugbar.toolbar.escape import make_safe


class Collector(ABC):
    """Abstract capability set every toolbar collector provides."""

    @abstractmethod
    def get_title(self, safe: bool = False) -> str: ...

    @abstractmethod
    def get_title_details(self) -> str: ...

    @abstractmethod
    def display(self) -> Any: ...

    @abstractmethod
    def get_badge_value(self) -> int | None: ...

    @abstractmethod
    def is_empty(self) -> bool: ...

    @abstractmethod
    def has_tab_content(self) -> bool: ...

    @abstractmethod
    def has_label(self) -> bool: ...

    @abstractmethod
    def icon(self) -> str: ...

    @abstractmethod
    def has_timeline_data(self) -> bool: ...

    @abstractmethod
    def timeline_data(self) -> list[TimelineEntry]: ...

    @abstractmethod
    def has_var_data(self) -> bool: ...

    @abstractmethod
    def get_var_data(self) -> Mapping[str, Mapping[str, Any]]: ...


class BaseCollector(Collector):
    """Collector with defaults driven by class attributes.

    Subclasses set ``title`` and the ``has_*`` flags, and override only the
    queries they actually answer. Timeline spans come from
    :meth:`format_timeline_data`; the base class tags them with the
    collector's title as ``component``.
    """

    title: ClassVar[str] = ""
    has_timeline: ClassVar[bool] = False
    has_tabs: ClassVar[bool] = False
    has_labels: ClassVar[bool] = False
    has_vars: ClassVar[bool] = False

    def __init__(self, scope: RequestScope) -> None:
        self.scope = scope

    def get_title(self, safe: bool = False) -> str:
        if safe:
            return make_safe(self.title.lower().replace(" ", "_"))
        return self.title

    def get_title_details(self) -> str:
        return ""

    def display(self) -> Any:
        return ""

    def get_badge_value(self) -> int | None:
        return None

    def is_empty(self) -> bool:
        return False

    def has_tab_content(self) -> bool:
        return self.has_tabs

    def has_label(self) -> bool:
        return self.has_labels

    def icon(self) -> str:
        return ""

    def has_timeline_data(self) -> bool:
        return self.has_timeline

    def format_timeline_data(self) -> list[TimelineEntry]:
        """Return raw spans; ``component`` is filled in by `timeline_data`."""
        return []

    def timeline_data(self) -> list[TimelineEntry]:
        if not self.has_timeline:
            return []
        component = self.get_title()
        return [
            entry.model_copy(update={"component": component})
            for entry in self.format_timeline_data()
        ]

    def has_var_data(self) -> bool:
        return self.has_vars

    def get_var_data(self) -> Mapping[str, Mapping[str, Any]]:
        return {}


__all__ = ["BaseCollector", "Collector"]
