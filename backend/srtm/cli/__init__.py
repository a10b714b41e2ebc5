"""
SRTM command-line tools.
"""
