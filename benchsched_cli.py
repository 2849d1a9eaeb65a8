#!/usr/bin/env python3
"""
benchsched CLI Entry Point

This file serves as the main entry point for the benchsched command-line tool
when running from a source checkout.
"""

import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent / 'src'
if src_path.exists():
    sys.path.insert(0, str(src_path))

from benchsched.cli.main import main

if __name__ == '__main__':
    main()
