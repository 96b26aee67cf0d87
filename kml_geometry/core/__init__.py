"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants (render and upload limits, Earth radius, display text)
- exceptions: Custom exception hierarchy
- ingress: HTTP boundary helpers for the Functions entrypoint
"""
