"""
Compilation Context

Responsibilities:
- Describes the read-only compilation environment (Sandbox)
- Runs the LaTeX engine on a source string
- Converts engine errors into byte-span diagnostics

Owns: Source compilation, engine log parsing
Never: Rasterizes pages or formats reports
"""
