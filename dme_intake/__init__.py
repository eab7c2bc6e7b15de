"""
DME Intake.

Extracts durable medical equipment orders from physician notes and submits
them to an external intake API.
"""

__version__ = "1.0.0"
