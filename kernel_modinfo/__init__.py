"""
Kernel Module Inventory Package

Lists the kernel modules loaded on a Linux host and extracts the static
metadata (.modinfo) embedded in installed compressed module binaries.
"""

from .models import LoadedModule, ModuleParameter, ModuleInfo, InventoryEntry
from .errors import (
    ModuleInventoryError, CorruptCompressionStream, MalformedBinaryImage,
    MalformedMetadataRecord, EnvironmentUnavailable, ModuleTableUnavailable
)
from .decompress import decompress
from .sections import find_section, MODINFO_SECTION
from .modinfo import parse_metadata
from .collector import (
    get_kernel_release, find_module_paths, parse_proc_modules,
    read_module_info, collect_module_info
)
from .formatters import JSONFormatter, CSVFormatter
from .filters import ModuleFilter, ModuleSorter, ModuleDisplay

__version__ = "1.0.0"

__all__ = [
    "LoadedModule",
    "ModuleParameter",
    "ModuleInfo",
    "InventoryEntry",
    "ModuleInventoryError",
    "CorruptCompressionStream",
    "MalformedBinaryImage",
    "MalformedMetadataRecord",
    "EnvironmentUnavailable",
    "ModuleTableUnavailable",
    "decompress",
    "find_section",
    "MODINFO_SECTION",
    "parse_metadata",
    "get_kernel_release",
    "find_module_paths",
    "parse_proc_modules",
    "read_module_info",
    "collect_module_info",
    "JSONFormatter",
    "CSVFormatter",
    "ModuleFilter",
    "ModuleSorter",
    "ModuleDisplay"
]
