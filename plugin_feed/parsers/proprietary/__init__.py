"""
Vendor-specific parsers for plugins sold outside wordpress.org.
"""

from .gravityforms import GRAVITY_FORMS
from .revslider import RevolutionSliderParser
from .ubermenu import UberMenuParser

__all__ = [
    'GRAVITY_FORMS',
    'RevolutionSliderParser',
    'UberMenuParser',
]
