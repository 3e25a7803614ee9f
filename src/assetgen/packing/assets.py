"""Memory-mapped asset table encoder (``assets.bin``).

Layout, all integers unsigned little-endian::

    offset 0:   u32 file_count
    offset 4:   u32 checksum           # 16-bit byte sum of table + payload
    offset 8:   u32 combined_length    # table_size + payload_size
    offset 12:  table[file_count] { char name[32]; u32 size; u32 offset;
                                    u16 width; u16 height }
    then:       payload[file_count] { 5A 5A; u8 data[size] }

Entry offsets are relative to the payload start and point at the marker.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..logging import get_logger
from .constants import (
    ASSET_RECORD_SIZE,
    NAME_FIELD_SIZE,
    PAYLOAD_MARKER,
)
from .errors import (
    W_DIMENSION_SNIFF,
    PackWarning,
    dimension_sniff_failure,
    empty_input,
    name_too_long,
)
from .formats import (
    FormatTag,
    SniffError,
    base_name_of,
    classify,
    extension_of,
    sniff_dimensions,
)
from .layout import (
    collation_key,
    compute_checksum,
    pack_name_string,
    pack_u16,
    pack_u32,
)
from .progress import Milestone, ProgressCallback, ProgressSink

__all__ = ["FileEntry", "ResolvedFileInfo", "AssetTableEncoder"]


@dataclass(frozen=True, slots=True)
class FileEntry:
    name: str
    data: bytes
    width: int = 0
    height: int = 0

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(slots=True)
class ResolvedFileInfo:
    name: str
    data: bytes
    size: int
    offset: int
    width: int = 0
    height: int = 0

    def pack_record(self) -> bytes:
        return (
            pack_name_string(self.name, NAME_FIELD_SIZE)
            + pack_u32(self.size)
            + pack_u32(self.offset)
            + pack_u16(self.width)
            + pack_u16(self.height)
        )


def _sort_key(entry: FileEntry):
    return (
        collation_key(extension_of(entry.name)),
        collation_key(base_name_of(entry.name)),
    )


@dataclass
class AssetTableEncoder:
    entries: List[FileEntry] = field(default_factory=list)
    warnings: List[PackWarning] = field(default_factory=list)

    def _warn(self, warning: PackWarning) -> None:
        self.warnings.append(warning)
        get_logger().warning(str(warning))

    def add_file(
        self, name: str, data: bytes, *, width: int = 0, height: int = 0
    ) -> FileEntry:
        # Checked on characters, like the firmware tooling; truncation at
        # encode time is always on encoded bytes.
        if len(name) > NAME_FIELD_SIZE:
            self._warn(name_too_long(name, NAME_FIELD_SIZE))
        entry = FileEntry(name, bytes(data), width or 0, height or 0)
        self.entries.append(entry)
        get_logger().debug("added %s (%d bytes)", name, entry.size)
        return entry

    def _resolve_dimensions(self, entry: FileEntry) -> tuple[int, int]:
        if entry.width or entry.height:
            return entry.width, entry.height
        tag = classify(entry.name)
        if tag is FormatTag.OTHER:
            return 0, 0
        try:
            return sniff_dimensions(tag, entry.data)
        except SniffError as e:
            self._warn(dimension_sniff_failure(entry.name, str(e)))
            return 0, 0

    def resolve(
        self, progress: Optional[ProgressCallback] = None
    ) -> List[ResolvedFileInfo]:
        """Sort entries and compute offsets and dimensions (no packing)."""
        # Sniff warnings belong to the latest resolve; name warnings persist.
        self.warnings[:] = [
            w for w in self.warnings if w.code != W_DIMENSION_SNIFF
        ]
        report = ProgressSink(progress)
        report(Milestone.START, "Packing files")
        ordered = sorted(self.entries, key=_sort_key)
        total = len(ordered)
        resolved: List[ResolvedFileInfo] = []
        offset = 0
        for i, entry in enumerate(ordered):
            report(
                Milestone.RESOLVE,
                f"Processing {entry.name}",
                index=i,
                total=total,
            )
            width, height = self._resolve_dimensions(entry)
            resolved.append(
                ResolvedFileInfo(
                    name=entry.name,
                    data=entry.data,
                    size=entry.size,
                    offset=offset,
                    width=width,
                    height=height,
                )
            )
            offset += len(PAYLOAD_MARKER) + entry.size
        return resolved

    def generate(self, progress: Optional[ProgressCallback] = None) -> bytes:
        if not self.entries:
            raise empty_input("files")
        return self.pack(self.resolve(progress), progress)

    def pack(
        self,
        infos: List[ResolvedFileInfo],
        progress: Optional[ProgressCallback] = None,
    ) -> bytes:
        """Emit the blob for already resolved entries."""
        if not infos:
            raise empty_input("files")
        report = ProgressSink(progress)
        total = len(infos)

        report(Milestone.TABLE, "Building file table")
        table = bytearray()
        for info in infos:
            table += info.pack_record()
        if len(table) != total * ASSET_RECORD_SIZE:
            raise RuntimeError(
                f"Table size mismatch: expected {total * ASSET_RECORD_SIZE} built {len(table)}"
            )

        report(Milestone.MERGE, "Merging file data")
        payload = bytearray()
        for i, info in enumerate(infos):
            report(
                Milestone.MERGE,
                f"Merging {info.name}",
                index=i,
                total=total,
            )
            if len(payload) != info.offset:
                raise RuntimeError(
                    f"Payload offset mismatch for {info.name}: planned={info.offset} actual={len(payload)}"
                )
            payload += PAYLOAD_MARKER
            payload += info.data

        report(Milestone.CHECKSUM, "Computing checksum")
        checksum = compute_checksum(table, payload)

        report(Milestone.ASSEMBLE, "Assembling output")
        blob = b"".join(
            (
                pack_u32(total),
                pack_u32(checksum),
                pack_u32(len(table) + len(payload)),
                bytes(table),
                bytes(payload),
            )
        )
        report(Milestone.DONE, "Done")
        get_logger().debug(
            "packed %d files, %d bytes, checksum=0x%04X",
            total,
            len(blob),
            checksum,
        )
        return blob

    def get_stats(self) -> Dict[str, Any]:
        total_size = sum(e.size for e in self.entries)
        file_types = Counter(
            (extension_of(e.name).lower() or "unknown") for e in self.entries
        )
        count = len(self.entries)
        return {
            "file_count": count,
            "total_size": total_size,
            "file_types": dict(file_types),
            "average_file_size": (
                (2 * total_size + count) // (2 * count) if count else 0
            ),
        }

    def clear(self) -> None:
        self.entries.clear()
        self.warnings.clear()
