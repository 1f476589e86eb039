#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

Build a tile database from a folder of images, then make a mosaic:

    python main.py build-db ./input/ --width 8
    python main.py mosaic ./img/schnauzer.jpg --width 512 --patch 8

Or use the module directly:

    python -m photomosaic.cli --help
"""

from photomosaic.cli import app

if __name__ == "__main__":
    app()
