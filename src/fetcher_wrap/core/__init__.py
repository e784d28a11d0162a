"""
Core Package.

Contains the rewrite machinery:
- Parser adapter and mutable source tree
- Structural queries, alias allocation and the scope-aware renamer
- Wrapper template registry and the orchestration engine
"""
