"""
Materials Kernel

A scan-driven tracker for materials moving between a warehouse and the
people who hold them:
- Serial-prefix matching of scanned codes
- Mode-conditioned receive/issue transitions
- Append-only audit log per material
- Single-step undo derived from the last log entry
"""

__version__ = "0.1.0"
