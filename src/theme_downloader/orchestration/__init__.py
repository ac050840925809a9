"""
Orchestration Layer - Workflow Coordination

This layer coordinates a theme download end to end.
- Directory setup, listing, per-asset download, packaging
- No HTTP or filesystem details of its own
- Composes extract and load operations
"""
