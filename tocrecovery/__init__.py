"""Operator-assisted disaster-recovery agent for the point-of-sale database."""

__version__ = "1.0.0"
__author__ = "TocGame Team"
