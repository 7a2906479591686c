"""
Link Builder

Absolute URIs for named routes of the running application.
"""
from typing import Any, Mapping, Optional
from fastapi import Request


class LinkBuilder:
    """Builds links relative to the base URL of the current request."""

    def __init__(self, request: Request):
        self.request = request

    def uri_for(self, route_name: str, query: Optional[Mapping[str, Any]] = None, **path_params: Any) -> str:
        """
        URI of `route_name` with `path_params` substituted and `query`
        appended as query-string parameters.
        """
        url = self.request.url_for(route_name, **{k: str(v) for k, v in path_params.items()})
        if query:
            url = url.include_query_params(**query)
        return str(url)
