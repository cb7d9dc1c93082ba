"""ripzip - Cross-platform ZIP archives that just work everywhere.

Turns directories into portable ZIP files with safe, collision-free names.
"""

__version__ = "0.1.0"
__author__ = "ripzip Contributors"

from ripzip.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
