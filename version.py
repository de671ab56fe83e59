"""
Version information for the docs edge site and the Webflow sync job.
This file follows semantic versioning (MAJOR.MINOR.PATCH):
- MAJOR version for incompatible changes to routing, rewrite or document formats
- MINOR version for backwards-compatible functionality
- PATCH version for backwards-compatible bug fixes
"""

__version__ = "1.0.0"
__version_info__ = tuple(map(int, __version__.split('.')))
