'''
Unit suffix to base unit (metre) multipliers.
'''

from types import MappingProxyType


CONVERSIONS = MappingProxyType({
    'km': 1000.0,
    'm': 1.0,
    'cm': 0.01,
    'mm': 0.001,
    'mi': 1609.344,
    'yd': 0.9144,
    'ft': 0.3048,
    'in': 0.0254,
})
