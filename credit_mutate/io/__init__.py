"""
IO Module

Output management for study runs.
"""

from credit_mutate.io.output_manager import OutputManager

__all__ = [
    "OutputManager",
]
