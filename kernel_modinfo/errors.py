"""
Exceptions raised while inventorying kernel modules.

Every failure that concerns a single module file derives from
ModuleInventoryError so that batch callers can isolate it per file.
"""


class ModuleInventoryError(Exception):
    """Base class for all kernel module inventory errors."""


class CorruptCompressionStream(ModuleInventoryError):
    """The compressed module stream is invalid, truncated or too large."""


class MalformedBinaryImage(ModuleInventoryError):
    """The decompressed image is not a consistent ELF file."""


class MalformedMetadataRecord(ModuleInventoryError):
    """A .modinfo record could not be decoded as text."""

    def __init__(self, message: str, index: int = -1):
        super().__init__(message)
        self.index = index


class EnvironmentUnavailable(ModuleInventoryError):
    """The running kernel release could not be determined."""


class ModuleTableUnavailable(ModuleInventoryError):
    """The loaded-module table (/proc/modules) could not be read."""
