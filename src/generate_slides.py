#!/usr/bin/env python3
"""
Script to render a markdown document into an HTML slideshow.
This is a thin wrapper around the slidedeck package.
"""

import sys
from slidedeck.cli import main

if __name__ == '__main__':
    sys.exit(main())
