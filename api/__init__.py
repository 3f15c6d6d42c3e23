"""
HTTP API for the rental listing scraper.
"""
