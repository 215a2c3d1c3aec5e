"""Call surface over ``httpx.AsyncClient`` that blocks until the exchange completes."""

from .api import DefaultHttpApi, HttpApi, Smart


__all__ = [
    'DefaultHttpApi',
    'HttpApi',
    'Smart',
]
