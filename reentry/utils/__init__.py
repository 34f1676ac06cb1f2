"""
Utilities shared by the reentry transcriptions and phases.
"""
