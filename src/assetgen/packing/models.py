"""Wakenet model bundle encoder (``srmodels.bin``).

Layout, all integers unsigned little-endian::

    u32 model_count
    per model, sorted by name:
        char model_name[32]
        u32  file_count
        per file, sorted by name:
            char file_name[32]
            u32  start      # absolute offset from blob start
            u32  length
    raw file bytes, same (model, file) order, contiguous

Names are packed one byte per character to stay bit-compatible with the
firmware's ``pack_model.py``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..logging import get_logger
from .constants import (
    MODEL_COUNT_SIZE,
    MODEL_ENTRY_SIZE,
    MODEL_FILE_ENTRY_SIZE,
    NAME_FIELD_SIZE,
    WAKENET9_MODELS,
    WAKENET9_PREFIX,
    WAKENET9S_CHIPS,
    WAKENET9S_MODELS,
    WAKENET9S_PREFIX,
    WAKENET_MODEL_FILES,
)
from .errors import PackWarning, empty_input, partial_fetch_failure
from .layout import collation_key, pack_name_latin, pack_u32
from .share import FetchResult, ShareFetcher, fetcher_for

__all__ = ["ModelGroup", "ModelBundleEncoder", "header_length"]


@dataclass(slots=True)
class ModelGroup:
    name: str
    files: Dict[str, bytes] = field(default_factory=dict)

    def sorted_files(self) -> List[tuple[str, bytes]]:
        return sorted(self.files.items(), key=lambda kv: collation_key(kv[0]))

    @property
    def size(self) -> int:
        return sum(len(d) for d in self.files.values())


def header_length(groups: List[ModelGroup]) -> int:
    return MODEL_COUNT_SIZE + sum(
        MODEL_ENTRY_SIZE + len(g.files) * MODEL_FILE_ENTRY_SIZE for g in groups
    )


@dataclass
class ModelBundleEncoder:
    models: Dict[str, ModelGroup] = field(default_factory=dict)
    warnings: List[PackWarning] = field(default_factory=list)

    def add_model_file(
        self, model_name: str, file_name: str, data: bytes
    ) -> None:
        group = self.models.get(model_name)
        if group is None:
            group = self.models[model_name] = ModelGroup(model_name)
        group.files[file_name] = bytes(data)

    def load_model_from_share(
        self, model_name: str, fetcher: Optional[ShareFetcher] = None
    ) -> bool:
        """Fetch the three standard wakenet files for ``model_name``.

        Files are fetched one after another. Failures are logged and
        skipped, so a partial group may remain registered; the return value
        is True only when every file arrived.
        """
        logger = get_logger()
        fetcher = fetcher or fetcher_for()
        results: List[FetchResult] = []
        for file_name in WAKENET_MODEL_FILES:
            result = fetcher.fetch(model_name, file_name)
            results.append(result)
            if result.ok:
                assert result.data is not None
                self.add_model_file(model_name, file_name, result.data)
                logger.debug(
                    "fetched %s/%s (%d bytes)",
                    model_name,
                    file_name,
                    len(result.data),
                )
            else:
                warning = partial_fetch_failure(
                    model_name, file_name, result.error or "unknown error"
                )
                self.warnings.append(warning)
                logger.warning(str(warning))
        return all(r.ok for r in results)

    def sorted_models(self) -> List[ModelGroup]:
        return sorted(self.models.values(), key=lambda g: collation_key(g.name))

    def pack_models(self) -> bytes:
        if not self.models:
            raise empty_input("models")
        groups = self.sorted_models()
        header_len = header_length(groups)

        header = bytearray(pack_u32(len(groups)))
        payload = bytearray()
        for group in groups:
            files = group.sorted_files()
            header += pack_name_latin(group.name, NAME_FIELD_SIZE)
            header += pack_u32(len(files))
            for file_name, data in files:
                header += pack_name_latin(file_name, NAME_FIELD_SIZE)
                header += pack_u32(header_len + len(payload))
                header += pack_u32(len(data))
                payload += data
        if len(header) != header_len:
            raise RuntimeError(
                f"Model header size mismatch: planned={header_len} built={len(header)}"
            )
        get_logger().debug(
            "packed %d models, header=%d payload=%d",
            len(groups),
            header_len,
            len(payload),
        )
        return bytes(header + payload)

    @staticmethod
    def available_models() -> Dict[str, List[str]]:
        return {
            "WakeNet9": list(WAKENET9_MODELS),
            "WakeNet9s": list(WAKENET9S_MODELS),
        }

    @staticmethod
    def is_valid_model(model_name: str, chip_model: str) -> bool:
        if chip_model in WAKENET9S_CHIPS:
            return model_name.startswith(WAKENET9S_PREFIX)
        return model_name.startswith(WAKENET9_PREFIX)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "model_count": len(self.models),
            "file_count": sum(len(g.files) for g in self.models.values()),
            "total_size": sum(g.size for g in self.models.values()),
            "models": list(self.models),
        }

    def clear(self) -> None:
        self.models.clear()
        self.warnings.clear()
