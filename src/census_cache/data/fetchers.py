import logging
from typing import List, Optional, Sequence

import pandas as pd
import requests
import certifi

from ..analytics.estimate import measure
from .keys import RequestKey

logger = logging.getLogger(__name__)

CENSUS_API = "https://api.census.gov/data"
USER_AGENT = "census-cache/0.1"

def _check_rows(rows):
    if not isinstance(rows, list) or not rows or not all(isinstance(r, list) for r in rows):
        raise ValueError("Census response is not a non-empty list of rows")
    width = len(rows[0])
    bad = [i for i, r in enumerate(rows) if len(r) != width]
    if bad:
        raise ValueError(f"Census response rows {bad[:5]} do not match header width {width}")
    return rows

def rows_to_frame(rows) -> pd.DataFrame:
    """Census JSON (header row first) -> DataFrame of strings."""
    rows = _check_rows(rows)
    df = pd.DataFrame(rows[1:], columns=[str(c) for c in rows[0]])
    return df.fillna("").astype(str)

def fetch_census_rows(dataset: str, year: int, variables: Sequence[str], geography: str,
                      within: Optional[str] = None, api_key: Optional[str] = None,
                      session: Optional[requests.Session] = None) -> List[list]:
    """
    GET one table from the Census Data API.
    Returns the raw JSON rows, header first. No retries: a failed request is
    the caller's decision to repeat.
    """
    params = {"get": ",".join(variables), "for": geography}
    if within:
        params["in"] = within
    if api_key:
        params["key"] = api_key

    url = f"{CENSUS_API}/{year}/{dataset}"
    sess = session or requests.Session()
    logger.debug("GET %s for=%s in=%s", url, geography, within)
    r = sess.get(
        url,
        params=params,
        timeout=30,
        verify=certifi.where(),
        headers={"User-Agent": USER_AGENT},
    )
    r.raise_for_status()
    try:
        rows = r.json()
    except ValueError as e:
        preview = r.text[:200].replace("\n", "\\n")
        raise ValueError(f"Census response is not JSON; preview='{preview}'") from e
    return _check_rows(rows)

def fetch_census_table(dataset: str, year: int, variables: Sequence[str], geography: str,
                       within: Optional[str] = None, api_key: Optional[str] = None,
                       session: Optional[requests.Session] = None) -> pd.DataFrame:
    rows = fetch_census_rows(dataset, year, variables, geography,
                             within=within, api_key=api_key, session=session)
    return rows_to_frame(rows)

def census_request(dataset: str, year: int, variables: Sequence[str], geography: str,
                   within: Optional[str] = None, api_key: Optional[str] = None,
                   session: Optional[requests.Session] = None, fmt: str = "json"):
    """
    Build the (RequestKey, fetch) pair for one Census query.
    The key never includes api_key. fmt picks what fetch returns:
    'json' -> raw rows, 'csv' -> DataFrame, matching the cache's serializer.
    """
    if fmt not in ("json", "csv"):
        raise ValueError(f"Unknown format: {fmt}")
    key = RequestKey.build(
        {"dataset": dataset, "year": int(year), "get": list(variables),
         "for": geography, "in": within},
        namespace="census",
    )
    fetcher = fetch_census_table if fmt == "csv" else fetch_census_rows

    def fetch():
        return fetcher(dataset, year, variables, geography,
                       within=within, api_key=api_key, session=session)

    return key, fetch

def fetch_counties(cache, state: str, counties: Sequence[str], variables: Sequence[str], year: int,
                   dataset: str = "dec/sf1", api_key: Optional[str] = None,
                   session: Optional[requests.Session] = None):
    """
    Resolve one request per county through `cache` and stack the results.
    Counties already cached cost nothing. Returns (frame, FetchStats).
    """
    sess = session or requests.Session()
    frames = []
    with measure(len(counties)) as m:
        for county in counties:
            key, fetch = census_request(dataset, year, variables, f"county:{county}",
                                        within=f"state:{state}", api_key=api_key,
                                        session=sess, fmt=cache.serializer.name)
            result = cache.resolve(key, fetch)
            frames.append(result if isinstance(result, pd.DataFrame) else rows_to_frame(result))
    logger.info("Resolved %d counties for state %s in %.2fs",
                len(counties), state, m.stats.elapsed.total_seconds())
    if not frames:
        return pd.DataFrame(columns=list(variables) + ["state", "county"]), m.stats
    return pd.concat(frames, ignore_index=True), m.stats
