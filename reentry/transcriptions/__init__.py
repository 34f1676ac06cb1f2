"""
Transcription classes available in reentry.
"""

from .transcription_base import Rectangular as Rectangular, Trapezoidal as Trapezoidal, \
    transcription_from_rule as transcription_from_rule
from .grid_data import StepGrid as StepGrid
