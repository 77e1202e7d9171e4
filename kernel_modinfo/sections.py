"""
Locating named sections inside a module's ELF image.

pyelftools parses the ELF header and the section headers; every offset
taken from them is checked against the image length before it is used.
"""

import io
import struct
from typing import List, Optional

from elftools.common.exceptions import ELFError
from elftools.common.utils import struct_parse
from elftools.elf.elffile import ELFFile
from elftools.elf.constants import SHN_INDICES

from .errors import MalformedBinaryImage

MODINFO_SECTION = '.modinfo'


def _section_headers(elf: ELFFile, stream: io.BytesIO, image_size: int) -> List:
    shoff = elf['e_shoff']
    entsize = elf['e_shentsize']
    count = elf.num_sections()
    if count and shoff + count * entsize > image_size:
        raise MalformedBinaryImage(
            f"Section table ({shoff:#x}+{count}*{entsize:#x}) exceeds image "
            f"length {image_size:#x}")
    return [struct_parse(elf.structs.Elf_Shdr, stream, shoff + index * entsize)
            for index in range(count)]


def _section_data(image: bytes, header, name: str) -> bytes:
    if header['sh_type'] == 'SHT_NOBITS':
        return b''
    offset = header['sh_offset']
    size = header['sh_size']
    if offset + size > len(image):
        raise MalformedBinaryImage(
            f"Section {name or '#' + str(header['sh_name'])} ({offset:#x}+{size:#x}) "
            f"exceeds image length {len(image):#x}")
    return bytes(image[offset:offset + size])


def _string_table(elf: ELFFile, headers: List, image: bytes) -> bytes:
    index = elf['e_shstrndx']
    if isinstance(index, str):
        index = getattr(SHN_INDICES, index)
    if index == SHN_INDICES.SHN_XINDEX:
        index = headers[0]['sh_link']
    if index >= len(headers):
        raise MalformedBinaryImage(
            f"Section name table index {index} out of range ({len(headers)} sections)")
    return _section_data(image, headers[index], '.shstrtab')


def _section_name(strtab: bytes, offset: int) -> str:
    if offset >= len(strtab):
        raise MalformedBinaryImage(
            f"Section name offset {offset:#x} outside name table of {len(strtab):#x} bytes")
    end = strtab.find(b'\x00', offset)
    if end < 0:
        end = len(strtab)
    return strtab[offset:end].decode('utf-8', errors='replace')


def find_section(image: bytes, name: str = MODINFO_SECTION) -> Optional[bytes]:
    """
    Return the content of the first section called ``name``.

    Args:
        image: Decompressed ELF image
        name: Section name to look up

    Returns:
        Optional[bytes]: The section content, or None if the image has no
        section with that name

    Raises:
        MalformedBinaryImage: If the image is not ELF, or its section table,
            name table or a section points outside the image
    """
    stream = io.BytesIO(image)
    try:
        elf = ELFFile(stream)
        headers = _section_headers(elf, stream, len(image))
        if not headers:
            return None
        strtab = _string_table(elf, headers, image)
        for header in headers:
            if header['sh_type'] == 'SHT_NULL':
                continue
            if _section_name(strtab, header['sh_name']) == name:
                return _section_data(image, header, name)
    except (ELFError, ValueError, OverflowError, struct.error) as e:
        raise MalformedBinaryImage(f"Invalid ELF image: {e}") from e

    return None
