from sqlident.utils import logging

__all__ = ("logging",)
