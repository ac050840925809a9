"""
Extract Layer - Pure I/O to the Shopify Admin API

This layer handles all remote calls with no filesystem side effects.
- No imports from the load layer
- Returns typed asset records
- Handles call spacing and the shop's call budget
"""
