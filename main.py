#!/usr/bin/env python3
"""
blockchat - chatbot block plugin host

This is a simple launcher for the Flask block host.
Once installed (pip install -e .) you can also run:
    blockchat
"""

import os
import sys
from pathlib import Path


def main():
    """Launch the blockchat Flask application"""

    # Allow running from a checkout without installing
    src_dir = Path(__file__).parent / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))

    from blockchat.app import main as run_app

    print("Starting blockchat...")
    print(f"Visit http://localhost:{os.getenv('FLASK_PORT', '5030')}/plugins in your browser")
    print("Press Ctrl+C to stop")

    try:
        run_app()
    except KeyboardInterrupt:
        print("\nblockchat stopped.")


if __name__ == "__main__":
    main()
