"""
Support code for blindfuzz: host shell selection, console output and
human-readable formatting.
"""
