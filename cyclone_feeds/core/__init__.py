"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants (archive defaults, source tags, units)
- exceptions: Custom exception hierarchy
"""
