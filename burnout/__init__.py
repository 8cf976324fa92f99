"""
IIS burnout chart tool.

Turns a W3C extended access log into a per-second request/response series,
then previews it as a rollup table or draws it as a burnout chart.
"""

__version__ = "0.9.0"
