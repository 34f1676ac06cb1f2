"""
Phase classes defined in reentry.
"""

from .phase import Phase as Phase
