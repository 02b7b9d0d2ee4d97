"""
pagesnap - first-page previews and source-anchored diagnostics for LaTeX documents

Compiles a LaTeX source string, rasterizes the first page of the result to a PNG
with a near-constant pixel budget, and turns compile errors into plain-text reports
positioned against the original source.

Architecture:
- Compilation Context: Sandbox, LaTeX engine invocation, log parsing
- Diagnostics Context: Byte-to-character span mapping and text reports
- Rendering Context: Scale selection, rasterization, PNG encoding, pipeline
"""

__version__ = "0.1.0"
