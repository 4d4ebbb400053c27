#!/usr/bin/env python3
"""
Browse a directory snapshot and print one row per object.

This example demonstrates:
- Loading connection settings from SNAPTREE_* environment variables
- Per-level progress reporting during container discovery
- Flattening records into rows

Usage:
    python examples/browse_snapshot.py <snapshot-id> <domain-name> [max-depth]
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from snaptreelib import (
    BrowseConfig,
    ClientConfig,
    DomainContext,
    SnapTreeError,
    list_domain_objects,
    setup_logging,
)


def main():
    """Browse one snapshot and print its objects."""
    if len(sys.argv) < 3:
        print(__doc__)
        return 2

    snapshot_id, domain_name = sys.argv[1], sys.argv[2]
    max_depth = int(sys.argv[3]) if len(sys.argv) > 3 else BrowseConfig().max_depth

    setup_logging(logging.INFO)

    def show_level(stats):
        print(f"  level {stats.depth}: {stats.discovered} new container(s)")

    try:
        records = list_domain_objects(
            ClientConfig.from_env(),
            snapshot_id,
            DomainContext(domain_name=domain_name),
            BrowseConfig(max_depth=max_depth),
            on_level=show_level,
        )
    except SnapTreeError as err:
        print(f"Browse failed: {err}", file=sys.stderr)
        return 1

    print(f"\n{len(records):,} object(s) in {snapshot_id}")
    print("-" * 50)
    for record in records:
        row = record.as_row()
        print(f"{row['kind'] or '?':<12} {row['display_name'] or '':<30} {row['distinguished_name'] or ''}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
