"""Routes collector: which route handled the request."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from debugbar.collectors.base import BaseCollector


class RoutesCollector(BaseCollector):
    title = "Routes"
    has_tabs = True
    has_vars = True

    def get_title_details(self) -> str:
        route = self.scope.route
        return route.endpoint if route else ""

    def display(self) -> Any:
        route = self.scope.route
        if route is None:
            return {}
        return {
            "matched": {
                "path": route.path,
                "endpoint": route.endpoint,
                "methods": ", ".join(route.methods),
            },
            "params": dict(route.path_params),
        }

    def is_empty(self) -> bool:
        return self.scope.route is None

    def icon(self) -> str:
        return "signpost"

    def get_var_data(self) -> Mapping[str, Mapping[str, Any]]:
        route = self.scope.route
        if route is None:
            return {}
        return {
            "Route": {
                "method": self.scope.request.method,
                "path": route.path,
                "endpoint": route.endpoint,
                **{f"param:{k}": v for k, v in route.path_params.items()},
            }
        }
