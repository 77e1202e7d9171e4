"""
Collectors for kernel module information.

This module contains functions that gather module information from the
running system: the loaded-module table in /proc/modules, the module
tree under /lib/modules/<release>, and the metadata embedded in each
compressed module binary.
"""

import os
import sys
from typing import Iterable, List, Optional

from .decompress import decompress
from .errors import EnvironmentUnavailable, ModuleTableUnavailable
from .modinfo import Reporter, parse_metadata
from .models import InventoryEntry, LoadedModule, ModuleInfo
from .sections import MODINFO_SECTION, find_section

PROC_MODULES_PATH = '/proc/modules'
MODULES_ROOT = '/lib/modules'
MODULE_SUFFIX = '.ko.gz'


def get_kernel_release() -> str:
    """
    Return the release string of the running kernel.

    Raises:
        EnvironmentUnavailable: If the platform cannot report its release
    """
    try:
        release = os.uname().release
    except (AttributeError, OSError) as e:
        raise EnvironmentUnavailable(f"Cannot determine kernel release: {e}") from e
    if not release:
        raise EnvironmentUnavailable("Kernel release is empty")
    return release


def find_module_paths(release: Optional[str] = None, root: str = MODULES_ROOT,
                      suffix: str = MODULE_SUFFIX) -> List[str]:
    """
    Find compressed module files installed for a kernel release.

    Args:
        release: Kernel release; defaults to the running kernel
        root: Directory holding one subdirectory per release
        suffix: File name suffix of module binaries

    Returns:
        List[str]: Sorted module paths, empty if the directory is missing
    """
    if release is None:
        release = get_kernel_release()
    module_dir = os.path.join(root, release)

    paths = []
    for dirpath, _dirnames, filenames in os.walk(module_dir):
        for filename in filenames:
            if filename.endswith(suffix):
                paths.append(os.path.join(dirpath, filename))
    paths.sort()
    return paths


def _parse_proc_modules_line(line: str) -> Optional[LoadedModule]:
    # module_name size ref_count dependencies [status address]
    parts = line.split()
    if len(parts) < 4:
        return None

    name = parts[0]
    size = int(parts[1])
    ref_count = int(parts[2])
    if size < 0 or ref_count < 0:
        raise ValueError(f"negative size or reference count in {line!r}")

    deps_str = parts[3]
    if deps_str == '-':
        dependencies = []
    else:
        # Trailing comma leaves an empty piece; [permanent] is a marker, not a module
        dependencies = [dep for dep in deps_str.split(',')
                        if dep and not dep.startswith('[')]

    status = parts[4] if len(parts) > 4 else ""
    address = parts[5] if len(parts) > 5 else ""
    return LoadedModule(name, size, ref_count, dependencies, status, address)


def parse_proc_modules(path: str = PROC_MODULES_PATH) -> List[LoadedModule]:
    """
    Parse the loaded-module table and return a list of LoadedModule objects.

    Malformed lines are skipped with a warning.

    Args:
        path: Location of the table

    Returns:
        List[LoadedModule]: Loaded kernel modules, in table order

    Raises:
        ModuleTableUnavailable: If the table cannot be read
    """
    modules = []

    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            lines = f.readlines()
    except OSError as e:
        raise ModuleTableUnavailable(f"Cannot read {path}: {e}") from e

    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue
        try:
            module = _parse_proc_modules_line(line)
        except ValueError as e:
            print(f"Warning: Skipping malformed line {lineno} of {path}: {e}", file=sys.stderr)
            continue
        if module is None:
            print(f"Warning: Skipping short line {lineno} of {path}: {line}", file=sys.stderr)
            continue
        modules.append(module)

    return modules


def read_module_info(path: str, report: Optional[Reporter] = None) -> Optional[ModuleInfo]:
    """
    Extract the metadata of one compressed module file.

    Args:
        path: Path to a .ko.gz file
        report: Reporter for unrecognized records, see parse_metadata

    Returns:
        Optional[ModuleInfo]: The metadata, or None if the module has no
        .modinfo section

    Raises:
        OSError: If the file cannot be read
        CorruptCompressionStream, MalformedBinaryImage, MalformedMetadataRecord
    """
    with open(path, 'rb') as f:
        compressed = f.read()

    image = decompress(compressed)
    section = find_section(image, MODINFO_SECTION)
    if section is None:
        return None
    return parse_metadata(section, path, report)


def collect_module_info(paths: Iterable[str], report: Optional[Reporter] = None,
                        verbose: bool = False) -> List[InventoryEntry]:
    """
    Run the metadata pipeline over many files.

    A failure in one file is recorded in its entry and does not stop the
    remaining files.

    Args:
        paths: Module files to inspect
        report: Reporter for unrecognized records, see parse_metadata
        verbose: Print per-file progress to stderr

    Returns:
        List[InventoryEntry]: One entry per path, in input order
    """
    entries = []
    for path in paths:
        if verbose:
            print(f"Reading {path}", file=sys.stderr)
        try:
            info = read_module_info(path, report)
        except Exception as e:
            print(f"Warning: Error reading module {path}: {e}", file=sys.stderr)
            entries.append(InventoryEntry(path, error=e))
            continue
        if info is None and verbose:
            print(f"No {MODINFO_SECTION} section in {path}", file=sys.stderr)
        entries.append(InventoryEntry(path, info))
    return entries
