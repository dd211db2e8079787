"""Request dependencies."""

from fastapi import Request

from advc_explorer.core.explorer import BlockExplorer


def get_explorer(request: Request) -> BlockExplorer:
    return request.app.state.explorer
