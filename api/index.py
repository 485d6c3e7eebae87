"""
Serverless entry point for the SEO Content Intelligence relay.

Hosting platforms that look for ``api/index.py`` import ``app`` from here.
"""

from seo_intelligence.api import app

__all__ = ["app"]
