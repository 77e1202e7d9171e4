"""
Data models for kernel modules.

This module contains the core data structures used to represent
loaded kernel modules and the static metadata of module binaries.
"""

import os
from typing import Dict, List, Optional


class LoadedModule:
    """Represents a loaded kernel module as listed in /proc/modules."""

    def __init__(self, name: str, size: int, ref_count: int,
                 dependencies: List[str], status: str = "", address: str = ""):
        """
        Initialize a LoadedModule instance.

        Args:
            name: Module name
            size: Resident size in bytes
            ref_count: Reference count
            dependencies: Names of the modules using this one
            status: Module status (Live, Loading, Unloading), if listed
            address: Load address, if listed
        """
        self.name = name
        self.size = size
        self.ref_count = ref_count
        self.dependencies = dependencies
        self.status = status
        self.address = address

    def __str__(self) -> str:
        """Return string representation of the module."""
        deps_str = ", ".join(self.dependencies) if self.dependencies else "None"
        return (f"Module: {self.name}\n"
                f"  Size: {self.size} bytes\n"
                f"  Reference Count: {self.ref_count}\n"
                f"  Dependencies: {deps_str}\n"
                f"  Status: {self.status or 'N/A'}\n"
                f"  Address: {self.address or 'N/A'}\n")

    def __repr__(self) -> str:
        return (f"LoadedModule(name='{self.name}', size={self.size}, "
                f"ref_count={self.ref_count})")

    def to_dict(self) -> dict:
        """Convert module to dictionary representation."""
        return {
            'name': self.name,
            'size': self.size,
            'ref_count': self.ref_count,
            'dependencies': self.dependencies,
            'status': self.status,
            'address': self.address
        }


class ModuleParameter:
    """A module parameter declared in the .modinfo section."""

    def __init__(self, name: str, description: str = "", kind: str = ""):
        self.name = name
        self.description = description
        self.kind = kind

    def __repr__(self) -> str:
        return (f"ModuleParameter(name='{self.name}', "
                f"description='{self.description}', kind='{self.kind}')")

    def __eq__(self, other) -> bool:
        if not isinstance(other, ModuleParameter):
            return NotImplemented
        return (self.name, self.description, self.kind) == \
            (other.name, other.description, other.kind)

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'description': self.description,
            'type': self.kind
        }


class ModuleInfo:
    """Static metadata extracted from one module binary."""

    def __init__(self):
        self.license = ""
        self.parameters: Dict[str, ModuleParameter] = {}
        self.alias: List[str] = []
        self.dependencies: List[str] = []
        self.description = ""
        self.authors: List[str] = []
        self.vermagic = ""
        self.intree = False
        self.firmwares: List[str] = []

    def __str__(self) -> str:
        """Return string representation in the manner of modinfo(8)."""
        lines = []
        if self.description:
            lines.append(f"  Description: {self.description}")
        for author in self.authors:
            lines.append(f"  Author: {author}")
        lines.append(f"  License: {self.license or 'N/A'}")
        lines.append(f"  Depends: {','.join(self.dependencies) or 'None'}")
        lines.append(f"  In-tree: {'Y' if self.intree else 'N'}")
        if self.vermagic:
            lines.append(f"  Vermagic: {self.vermagic}")
        for alias in self.alias:
            lines.append(f"  Alias: {alias}")
        for firmware in self.firmwares:
            lines.append(f"  Firmware: {firmware}")
        for parameter in self.parameters.values():
            kind = f" ({parameter.kind})" if parameter.kind else ""
            lines.append(f"  Parm: {parameter.name}:{parameter.description}{kind}")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return (f"ModuleInfo(license='{self.license}', "
                f"parameters={len(self.parameters)}, "
                f"dependencies={self.dependencies})")

    def to_dict(self) -> dict:
        """Convert module metadata to dictionary representation."""
        return {
            'license': self.license,
            'parameters': {name: parameter.to_dict()
                           for name, parameter in self.parameters.items()},
            'alias': self.alias,
            'dependencies': self.dependencies,
            'description': self.description,
            'authors': self.authors,
            'vermagic': self.vermagic,
            'intree': self.intree,
            'firmwares': self.firmwares
        }


class InventoryEntry:
    """
    Result of running the metadata pipeline over one module file.

    Exactly one of the following holds: ``info`` is set, the file has no
    metadata section (``info`` and ``error`` are both None), or ``error``
    holds the per-file failure.
    """

    def __init__(self, path: str, info: Optional[ModuleInfo] = None,
                 error: Optional[Exception] = None):
        self.path = path
        self.info = info
        self.error = error

    @property
    def name(self) -> str:
        """Module name derived from the file name (foo.ko.gz -> foo)."""
        base = os.path.basename(self.path)
        return base.split('.ko', 1)[0]

    @property
    def failed(self) -> bool:
        return self.error is not None

    def __str__(self) -> str:
        header = f"Module: {self.name}\n  File Path: {self.path}\n"
        if self.error is not None:
            return header + f"  Error: {type(self.error).__name__}: {self.error}\n"
        if self.info is None:
            return header + "  Metadata: N/A (no .modinfo section)\n"
        return header + str(self.info)

    def __repr__(self) -> str:
        return f"InventoryEntry(path='{self.path}', failed={self.failed})"

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'path': self.path,
            'info': self.info.to_dict() if self.info is not None else None,
            'error': f"{type(self.error).__name__}: {self.error}"
                     if self.error is not None else None
        }
