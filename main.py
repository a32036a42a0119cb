#!/usr/bin/env python3
"""PomoClock entry point.

Run with:
    python main.py
    python -m pomoclock
"""

from pomoclock.__main__ import main


if __name__ == "__main__":
    main()
