#!/usr/bin/env python3
"""Direct launcher for the appropriations report Streamlit page."""

import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.resolve()
report_page = project_root / "appropriations_report" / "report.py"

if __name__ == "__main__":
    subprocess.run([sys.executable, "-m", "streamlit", "run", str(report_page)], cwd=project_root)
