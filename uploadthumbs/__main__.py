"""
Main entry point for running the package as a module.

Usage:
    python -m uploadthumbs -c thumbs.json generate --id 42 --file photo.jpg
    python -m uploadthumbs -c thumbs.json url --id 42 --file photo.jpg -p preview
    python -m uploadthumbs -c thumbs.json delete --id 42 --file photo.jpg
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
