"""
`python -m pbxkit` entrypoint.

The CLI lives in `pbxkit/cli.py` so that importing `pbxkit` from library code
does not pull in argparse wiring.
"""

from __future__ import annotations

from . import cli


def main() -> int:
    """Delegate to `pbxkit.cli.main`."""
    return cli.main()


if __name__ == "__main__":
    raise SystemExit(main())
