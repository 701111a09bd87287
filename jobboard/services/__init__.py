"""
Services module - one service class per collection.

Services own all database access and raise jobboard.core.errors
exceptions; routes only translate HTTP input into service calls.
"""
