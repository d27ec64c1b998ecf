"""Entry formats for the fetch cache.

Both formats are deterministic: the same value always encodes to the same
bytes, so a cache directory can be shipped alongside the code that made it.
"""
import io
import json

import pandas as pd

class JsonSerializer:
    name = "json"
    suffix = ".json"

    def dumps(self, obj) -> bytes:
        text = json.dumps(obj, sort_keys=True, separators=(",", ":"),
                          ensure_ascii=False, allow_nan=False)
        return (text + "\n").encode("utf-8")

    def loads(self, data: bytes):
        return json.loads(data.decode("utf-8"))

class CsvSerializer:
    """DataFrames of strings, the shape the Census API returns."""
    name = "csv"
    suffix = ".csv"

    def dumps(self, df) -> bytes:
        if not isinstance(df, pd.DataFrame):
            raise TypeError(f"CSV entries must be DataFrames, got {type(df).__name__}")
        return df.to_csv(index=False, lineterminator="\n").encode("utf-8")

    def loads(self, data: bytes):
        return pd.read_csv(io.BytesIO(data), dtype=str, keep_default_na=False)

SERIALIZERS = {s.name: s for s in (JsonSerializer(), CsvSerializer())}

def get_serializer(name: str):
    try:
        return SERIALIZERS[name]
    except KeyError:
        raise ValueError(f"Unknown serializer: {name}") from None
