"""
Utilities - input sanitization and upload intake.
"""
