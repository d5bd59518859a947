"""
Module entry-point that makes the package runnable with

    python -m drive_mirror

The behaviour is identical to the *drive-mirror-cli* console script because
the Click **group** imported below performs all CLI dispatching.
"""

from drive_mirror.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
