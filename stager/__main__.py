#!/usr/bin/env python3
"""
Entry point for running stager as a module: python -m stager
"""

import sys

from stager.main import main


if __name__ == '__main__':
    sys.exit(main())
