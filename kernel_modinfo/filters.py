"""
Filtering, sorting and display functionality for kernel modules.

This module contains classes for filtering and sorting loaded modules and
inventory entries, and for printing them as text.
"""

import fnmatch
from typing import List, Optional

from .models import InventoryEntry, LoadedModule


class ModuleFilter:
    """Filter modules based on various criteria."""

    @staticmethod
    def filter_modules(modules: List[LoadedModule],
                       name_pattern: Optional[str] = None,
                       min_size: Optional[int] = None,
                       max_size: Optional[int] = None,
                       min_refs: Optional[int] = None) -> List[LoadedModule]:
        """
        Filter loaded modules based on various criteria.

        Args:
            modules: List of modules to filter
            name_pattern: Wildcard pattern for module names
            min_size: Minimum size in bytes
            max_size: Maximum size in bytes
            min_refs: Minimum reference count

        Returns:
            List of filtered modules
        """
        filtered = []

        for module in modules:
            if name_pattern and not fnmatch.fnmatch(module.name, name_pattern):
                continue
            if min_size is not None and module.size < min_size:
                continue
            if max_size is not None and module.size > max_size:
                continue
            if min_refs is not None and module.ref_count < min_refs:
                continue
            filtered.append(module)

        return filtered

    @staticmethod
    def filter_entries(entries: List[InventoryEntry],
                       name_pattern: Optional[str] = None,
                       license: Optional[str] = None,
                       intree_only: bool = False,
                       failed_only: bool = False) -> List[InventoryEntry]:
        """
        Filter inventory entries based on their metadata.

        Args:
            entries: List of entries to filter
            name_pattern: Wildcard pattern for module names
            license: Exact license string to match
            intree_only: Keep only modules built in the kernel tree
            failed_only: Keep only files that could not be read

        Returns:
            List of filtered entries
        """
        filtered = []

        for entry in entries:
            if name_pattern and not fnmatch.fnmatch(entry.name, name_pattern):
                continue
            if failed_only:
                if entry.failed:
                    filtered.append(entry)
                continue
            # Metadata criteria can only match entries that have metadata
            if license is not None and (entry.info is None or entry.info.license != license):
                continue
            if intree_only and (entry.info is None or not entry.info.intree):
                continue
            filtered.append(entry)

        return filtered


class ModuleSorter:
    """Sort modules by specified field."""

    @staticmethod
    def sort_modules(modules: List[LoadedModule],
                     sort_by: str = 'name', reverse: bool = False) -> List[LoadedModule]:
        """
        Sort modules by specified field.

        Args:
            modules: List of modules to sort
            sort_by: Field to sort by ('name', 'size', 'refs')
            reverse: Reverse sort order

        Returns:
            Sorted list of modules
        """
        def sort_key(module):
            if sort_by == 'size':
                return module.size
            elif sort_by == 'refs':
                return module.ref_count
            return module.name.lower()

        return sorted(modules, key=sort_key, reverse=reverse)

    @staticmethod
    def sort_entries(entries: List[InventoryEntry], reverse: bool = False) -> List[InventoryEntry]:
        """Sort inventory entries by module name, then path."""
        return sorted(entries, key=lambda entry: (entry.name.lower(), entry.path),
                      reverse=reverse)


class ModuleDisplay:
    """Display modules in various formats."""

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """Convert bytes to human readable format."""
        for unit in ['B', 'KB', 'MB', 'GB']:
            if size_bytes < 1024.0:
                return f"{size_bytes:.1f} {unit}"
            size_bytes /= 1024.0
        return f"{size_bytes:.1f} TB"

    @staticmethod
    def display_modules(modules: List[LoadedModule], show_details: bool = False,
                        quiet: bool = False):
        """
        Display the loaded kernel modules.

        Args:
            modules: List of LoadedModule objects
            show_details: If True, show detailed information for each module
            quiet: If True, suppress headers and only show module data
        """
        if not quiet:
            print(f"Loaded Kernel Modules ({len(modules)} total)\n")
            print("=" * 60)

        if not show_details:
            if not quiet:
                print(f"| {'Module Name':<25} | {'Size':<10} | {'Ref Count':<10} | {'Used By':<40} |")
                print("|" + "-" * 27 + "|" + "-" * 12 + "|" + "-" * 12 + "|" + "-" * 42 + "|")
            for module in modules:
                size_str = ModuleDisplay.format_size(module.size)
                used_by = ",".join(module.dependencies) or '-'
                print(f"| {module.name:<25} | {size_str:<10} | {module.ref_count:<10} | {used_by:<40} |")
        else:
            for i, module in enumerate(modules, 1):
                print(f"{i}. {module}")

    @staticmethod
    def display_entries(entries: List[InventoryEntry], show_details: bool = False,
                        quiet: bool = False):
        """
        Display the metadata of module files.

        Args:
            entries: List of InventoryEntry objects
            show_details: If True, show all metadata for each module
            quiet: If True, suppress headers and only show module data
        """
        failed = sum(1 for entry in entries if entry.failed)
        if not quiet:
            print(f"Module Files ({len(entries)} total, {failed} unreadable)\n")
            print("=" * 60)

        if not show_details:
            if not quiet:
                print(f"| {'Module Name':<25} | {'License':<12} | {'In-tree':<7} | {'Description':<50} |")
                print("|" + "-" * 27 + "|" + "-" * 14 + "|" + "-" * 9 + "|" + "-" * 52 + "|")
            for entry in entries:
                if entry.failed:
                    license, intree, description = 'N/A', 'N/A', f"Error: {entry.error}"
                elif entry.info is None:
                    license, intree, description = 'N/A', 'N/A', 'No metadata'
                else:
                    license = entry.info.license or 'N/A'
                    intree = 'Y' if entry.info.intree else 'N'
                    description = entry.info.description or 'N/A'
                print(f"| {entry.name:<25} | {license:<12} | {intree:<7} | {description:<50} |")
        else:
            for i, entry in enumerate(entries, 1):
                print(f"{i}. {entry}")
