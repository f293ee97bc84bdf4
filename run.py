#!/usr/bin/env python3
"""
CLI entry point for the RSVP sheet sync system.
"""
from rsvp_sync.main import main

if __name__ == "__main__":
    main()
