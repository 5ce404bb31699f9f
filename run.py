#!/usr/bin/env python3
"""Convenience runner for the track replay tool.

Usage:
    python run.py track.csv --owner runner-1 [--territories territories.json]
"""
import sys

from territory_engine.tools.replay_track import main

if __name__ == "__main__":
    sys.exit(main())
