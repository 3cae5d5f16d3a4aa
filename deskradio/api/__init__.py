"""
DeskRadio API modules - External service integrations.
"""
from .station import StationAPI, MockStationAPI

__all__ = ['StationAPI', 'MockStationAPI']
