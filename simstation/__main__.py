#!/usr/bin/env python3
"""
SimStation entry point for running as a module: python3 -m simstation
"""

import sys
from simstation.cli import main

if __name__ == '__main__':
    sys.exit(main())
