"""
WidgetSmith: generates Playwright interactors and specs for new UI units.
"""

__version__ = "0.1.0"
