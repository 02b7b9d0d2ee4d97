"""
Shared utilities for pagesnap.

Common functionality used across contexts:
- Logging setup
- Settings resolution
- PDF reading
"""
