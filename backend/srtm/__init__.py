"""
SRTM STIG Toolkit

Security Requirements Traceability Matrix support library: STIG family
recommendations, STIG catalog management, STIG content import and NIST
SP 800-53 baseline lookups.
"""

__version__ = "1.0.0"
