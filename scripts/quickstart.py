# Run:  CENSUS_API_KEY=... python scripts/quickstart.py [project_dir]

import logging
import os
import sys

from census_cache.config import ProjectLayout
from census_cache.data.cache import FetchCache
from census_cache.data.fetchers import fetch_counties
from census_cache.analytics.estimate import estimate_table

def main():
    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")

    # 1) Layout: raw/ is hand-made, cache/ and generated/ can always be rebuilt
    layout = ProjectLayout(sys.argv[1] if len(sys.argv) > 1 else "data").ensure()
    cache = FetchCache(layout.cache_config(serializer="csv"))

    # 2) Query: total population for a 30-county sample of Pennsylvania (state 42)
    api_key = os.environ.get("CENSUS_API_KEY")
    sample = [f"{c:03d}" for c in range(1, 61, 2)]
    variables = ["NAME", "P001001"]

    # 3) Fetch (slow the first time, instant afterwards)
    df, stats = fetch_counties(cache, state="42", counties=sample, variables=variables,
                               year=2010, api_key=api_key)
    print(df.head(10))
    print(f"\n{len(sample)} counties in {stats.elapsed.total_seconds():.1f}s "
          f"({stats.per_unit.total_seconds():.2f}s per county)")

    # 4) Plan the full run from the sample timing
    plan = estimate_table(stats.elapsed, stats.units, [100, 1000, 3000])
    print("\n=== Estimated full-run time ===")
    print(plan.to_string(index=False))

    out = layout.generated / "pa_population_sample.csv"
    df.to_csv(out, index=False)
    print(f"\nSaved: {out}")

if __name__ == "__main__":
    main()
