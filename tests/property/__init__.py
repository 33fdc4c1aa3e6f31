"""
Property-based tests (Hypothesis) for the book registry, reference
validation and scripture parsing.
"""
