"""
bioprotease test suite.

Tests are organized by module:
- test_window: Sentinel padding and P4..P4' window construction
- test_specificity: Built-in table, rule types and registry
- test_engine: Digestion engine operations and their agreement
- test_cache: Memory and disk result caches
- test_sequence / test_models: Input handling and record-level models
- test_cli: Command-line interface
"""
