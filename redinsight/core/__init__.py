"""
Core components for RedInsight: the proxy gateway and the viewer pipeline.
"""

from .client import APIError, RedditProxyClient
from .dispatcher import Dispatcher, ViewerSession
from .gateway import GatewayResponse, ProxyGateway
from .pipeline import ContentPipeline, Panel, PanelUpdate
from .state import Section, SelectionState

__all__ = [
    "APIError",
    "RedditProxyClient",
    "Dispatcher",
    "ViewerSession",
    "GatewayResponse",
    "ProxyGateway",
    "ContentPipeline",
    "Panel",
    "PanelUpdate",
    "Section",
    "SelectionState",
]
