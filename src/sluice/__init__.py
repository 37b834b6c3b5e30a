"""
Sluice: element-processing runtime for windowed, timestamped records.

Runs user DoFns over bundles of records, enforcing the bundle lifecycle,
window inheritance, timestamp skew bounds and declared side outputs.
"""

__version__ = "0.1.0"
