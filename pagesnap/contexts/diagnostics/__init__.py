"""
Diagnostics Context

Responsibilities:
- Maps UTF-8 byte spans onto character spans
- Renders diagnostics as plain-text reports against the source

Owns: Span mapping, report layout
Never: Compiles or renders documents
"""
