"""
Error types, file helpers and progress reporting.
"""
