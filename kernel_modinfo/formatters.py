"""
Output formatters for kernel module data.

This module contains classes for formatting loaded modules and module
file metadata into machine-readable output formats (JSON, CSV).
"""

import csv
import io
import json
from typing import List, Optional

from .models import InventoryEntry, LoadedModule


class BaseFormatter:
    """Base class for all formatters."""

    def format(self, modules: List[LoadedModule],
               entries: Optional[List[InventoryEntry]] = None,
               kernel_release: str = "") -> str:
        """
        Format modules into output string.

        Args:
            modules: List of loaded modules
            entries: List of module file inventory entries
            kernel_release: Release the module files belong to

        Returns:
            str: Formatted output
        """
        raise NotImplementedError


class JSONFormatter(BaseFormatter):
    """Formatter for JSON output."""

    def format(self, modules: List[LoadedModule],
               entries: Optional[List[InventoryEntry]] = None,
               kernel_release: str = "") -> str:
        """Convert modules to JSON format."""
        data = {
            'kernel_release': kernel_release,
            'loaded_modules': [module.to_dict() for module in modules],
            'module_files': [entry.to_dict() for entry in entries or []]
        }
        return json.dumps(data, indent=2)


class CSVFormatter(BaseFormatter):
    """Formatter for CSV output."""

    def format(self, modules: List[LoadedModule],
               entries: Optional[List[InventoryEntry]] = None,
               kernel_release: str = "") -> str:
        """Convert modules to CSV format, one row per module or module file."""
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow(['Name', 'Source', 'Size', 'Ref Count', 'Dependencies',
                         'License', 'In-tree', 'Description', 'Path', 'Error'])

        for module in modules:
            writer.writerow([
                module.name,
                'Loaded',
                module.size,
                module.ref_count,
                ','.join(module.dependencies),
                '', '', '', '', ''
            ])

        for entry in entries or []:
            info = entry.info
            writer.writerow([
                entry.name,
                'File',
                '',
                '',
                ','.join(info.dependencies) if info else '',
                info.license if info else '',
                ('Y' if info.intree else 'N') if info else '',
                info.description if info else '',
                entry.path,
                str(entry.error) if entry.error is not None else ''
            ])

        return output.getvalue()
