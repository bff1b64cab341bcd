"""
HTTP exposition for the exporter.
"""
