"""
Shopify Theme Downloader

Downloads every asset of a Shopify theme through the Admin REST API and packs
them into a single tar archive, spacing calls against the shop's rate limits.
"""

__version__ = "1.0.0"
