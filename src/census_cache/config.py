from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Union

PathLike = Union[str, Path]

@dataclass(frozen=True)
class CacheConfig:
    cache_root: Path
    serializer: Literal["json", "csv"] = "json"
    on_corrupt: Literal["raise", "refetch"] = "raise"   # refetch => logged overwrite

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "cache_root", Path(self.cache_root))
        if self.serializer not in ("json", "csv"):
            raise ValueError(f"Unknown serializer: {self.serializer}")
        if self.on_corrupt not in ("raise", "refetch"):
            raise ValueError(f"Unknown on_corrupt policy: {self.on_corrupt}")

@dataclass(frozen=True)
class ProjectLayout:
    """Where a project keeps its data.

    raw:       obtained by hand, never regenerated
    cache:     fetched programmatically, safe to delete and refetch
    generated: derived locally from raw + cache
    """
    root: Path

    def __post_init__(self):
        object.__setattr__(self, "root", Path(self.root))

    @property
    def raw(self) -> Path:
        return self.root / "raw"

    @property
    def cache(self) -> Path:
        return self.root / "cache"

    @property
    def generated(self) -> Path:
        return self.root / "generated"

    def ensure(self):
        for p in (self.raw, self.cache, self.generated):
            p.mkdir(parents=True, exist_ok=True)
        return self

    def cache_config(self, serializer: Literal["json", "csv"] = "json",
                     on_corrupt: Literal["raise", "refetch"] = "raise") -> CacheConfig:
        return CacheConfig(cache_root=self.cache, serializer=serializer, on_corrupt=on_corrupt)
