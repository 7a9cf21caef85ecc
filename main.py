#!/usr/bin/env python3
"""
Main entry point for the Twitch IRC client
"""

import sys

from twitch_irc.main import main

if __name__ == "__main__":
    sys.exit(main())
