"""
Services Layer for DME Intake.

Exports note reading, extraction and processing services.
"""
