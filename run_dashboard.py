#!/usr/bin/env python
"""
Run the Statistics Dashboard

Usage:
    streamlit run stats_dashboard/app.py

    or

    python run_dashboard.py  # Will invoke streamlit
"""

import subprocess
import sys
from pathlib import Path


def main():
    # Path to the app
    app_path = Path(__file__).parent / "stats_dashboard" / "app.py"

    if not app_path.exists():
        print(f"Error: App not found at {app_path}")
        sys.exit(1)

    # Run streamlit
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        str(app_path),
        "--browser.gatherUsageStats", "false"
    ])


if __name__ == "__main__":
    main()
