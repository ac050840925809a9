"""
Load Layer - Local Persistence

This layer handles everything written to the local filesystem.
- Asset files under the output directory
- The final tar archive
- No API calls, just I/O operations
"""
