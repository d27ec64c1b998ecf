import hashlib
import json
from dataclasses import dataclass
from typing import Any, Mapping

def _normalise(value: Any):
    if isinstance(value, Mapping):
        return {str(k): _normalise(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalise(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    raise TypeError(f"Request parameter of type {type(value).__name__} is not JSON-representable: {value!r}")

@dataclass(frozen=True)
class RequestKey:
    """Stable identifier for one request.

    `canonical` is the JSON encoding of the parameters with sorted keys and
    compact separators, so equal parameter sets give equal keys and values
    containing separators cannot run into each other.
    """
    namespace: str
    canonical: str

    @classmethod
    def build(cls, params: Mapping[str, Any], namespace: str = "default") -> "RequestKey":
        if not namespace or "/" in namespace or "\\" in namespace:
            raise ValueError(f"Invalid key namespace: {namespace!r}")
        canonical = json.dumps(_normalise(dict(params)), sort_keys=True,
                               separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        return cls(namespace=namespace, canonical=canonical)

    @classmethod
    def coerce(cls, key, namespace: str = "default") -> "RequestKey":
        if isinstance(key, RequestKey):
            return key
        if isinstance(key, str):
            return cls.build({"query": key}, namespace=namespace)
        if isinstance(key, Mapping):
            return cls.build(key, namespace=namespace)
        raise TypeError(f"Cannot build a RequestKey from {type(key).__name__}")

    @property
    def params(self) -> dict:
        return json.loads(self.canonical)

    @property
    def digest(self) -> str:
        return hashlib.sha256(self.canonical.encode("utf-8")).hexdigest()[:16]

    def filename(self, suffix: str) -> str:
        return f"{self.namespace}_{self.digest}{suffix}"
