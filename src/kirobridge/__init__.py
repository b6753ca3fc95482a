"""Bridge between Kiro spec directories and the project source tree.

Subpackages:
- data/: layout constants, workspace paths, typed records and the file-backed store
- spec/: spec initialization, completeness validation, metadata and hook setup
- generate/: regex extractors, stub renderers and the sync orchestration
- conventions/: regex-based convention and security checks
- cli/: console entry points
"""

__version__ = "0.1.0"
