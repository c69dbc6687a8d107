#!/usr/bin/env python3
"""
SynthSub Entry Point Script

This script initializes the CLI handler and runs the subtitle pipeline.
"""

import sys
from synthsub.cli import CLIHandler

if __name__ == "__main__":
    if sys.version_info < (3, 8):
        sys.stderr.write("SynthSub requires Python 3.8 or later.\n")
        sys.exit(1)

    cli = CLIHandler()
    cli.run()
