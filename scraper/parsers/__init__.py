"""
Parser module
"""
from .event import EventParser
from .race import RaceParser

__all__ = ['EventParser', 'RaceParser']
