#!/usr/bin/env python3
"""
Generate graphs from collectd RRD files.

Thin wrapper around cgg.cli for running from a source checkout, e.g.:

    python scripts/generate_graphs.py -i /var/lib/collectd/myhost -t "last 4 hours"
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cgg.cli import main


if __name__ == "__main__":
    sys.exit(main())
