"""
                Kitchen Sheet

Order journal and kitchen projection for a small food-ordering service.
Every order is appended to a durable journal; the kitchen workbook is a
projection of that journal that can be rebuilt from it at any time.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
