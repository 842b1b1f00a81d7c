"""
Vet Clinic Records API
"""

__version__ = "1.0.0"
