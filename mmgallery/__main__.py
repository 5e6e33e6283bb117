"""
Main entry point for running the package as a module.

Usage:
    python -m mmgallery serve --dir /srv/maimai
    python -m mmgallery show --dir /srv/maimai
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
