"""
Parser for the .modinfo section of kernel module binaries.

The section is a sequence of NUL-terminated ``key=value`` strings emitted
by the MODULE_* macros (MODULE_LICENSE, MODULE_PARM_DESC, ...).
"""

import sys
from typing import Callable, Optional

from .errors import MalformedMetadataRecord
from .models import ModuleInfo, ModuleParameter

Reporter = Callable[[str, str], None]


def print_unrecognized(path: str, record: str) -> None:
    """Default reporter for records the parser does not understand."""
    print(f"Warning: Unrecognized modinfo record in {path}: {record}", file=sys.stderr)


def _parm(info: ModuleInfo, value: str) -> None:
    name, _, description = value.partition(':')
    info.parameters[name] = ModuleParameter(name, description)


def _parmtype(info: ModuleInfo, value: str) -> None:
    name, _, kind = value.partition(':')
    parameter = info.parameters.get(name)
    if parameter is not None:
        parameter.kind = kind


def _license(info: ModuleInfo, value: str) -> None:
    info.license = value


def _description(info: ModuleInfo, value: str) -> None:
    info.description = value


def _vermagic(info: ModuleInfo, value: str) -> None:
    info.vermagic = value


def _alias(info: ModuleInfo, value: str) -> None:
    info.alias.append(value)


def _depends(info: ModuleInfo, value: str) -> None:
    info.dependencies.extend(dep for dep in value.split(',') if dep)


def _author(info: ModuleInfo, value: str) -> None:
    info.authors.append(value)


def _intree(info: ModuleInfo, value: str) -> None:
    info.intree = value == 'Y'


def _firmware(info: ModuleInfo, value: str) -> None:
    info.firmwares.append(value)


def _ignore(info: ModuleInfo, value: str) -> None:
    pass


HANDLERS = {
    'parm': _parm,
    'parmtype': _parmtype,
    'license': _license,
    'description': _description,
    'vermagic': _vermagic,
    'alias': _alias,
    'depends': _depends,
    'author': _author,
    'intree': _intree,
    'firmware': _firmware,
    # Present in real modules but not part of the inventory
    'version': _ignore,
    'srcversion': _ignore,
    'staging': _ignore,
    'release_date': _ignore,
    'softdep': _ignore,
}


def parse_metadata(section: bytes, path: str = "",
                   report: Optional[Reporter] = None) -> ModuleInfo:
    """
    Parse the raw content of a .modinfo section.

    Records are applied in the order they appear. Records with an unknown
    key, or without a ``=``, are passed to ``report`` and otherwise skipped.

    Args:
        section: Raw section bytes
        path: Module file the section came from, used in diagnostics
        report: Called as report(path, record) for unrecognized records;
            defaults to a warning on stderr

    Returns:
        ModuleInfo: The parsed metadata

    Raises:
        MalformedMetadataRecord: If a record is not valid UTF-8
    """
    if report is None:
        report = print_unrecognized

    info = ModuleInfo()
    for index, raw in enumerate(section.split(b'\x00')):
        if not raw:
            continue
        try:
            record = raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedMetadataRecord(
                f"Record {index} in {path or '<section>'} is not valid UTF-8: {e}",
                index) from e

        key, sep, value = record.partition('=')
        handler = HANDLERS.get(key) if sep else None
        if handler is None:
            report(path, record)
            continue
        handler(info, value)

    return info
