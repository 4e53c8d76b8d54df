"""
RedInsight - a browser-based Reddit viewer.

This package provides a same-origin JSON proxy for the Reddit API and the
request/render pipeline that turns Reddit listings into HTML fragments.
"""

__version__ = "1.0.0"
