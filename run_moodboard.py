"""
run_moodboard.py: CLI entry point

This script serves as the command-line interface entry point for the
moodboard compositor. It forwards execution to the CLI logic defined in
`src/moodboard/cli.py`.

Usage:
    python run_moodboard.py a.jpg b.png c.jpg [options]

This wrapper allows you to run the tool directly without needing to
modify PYTHONPATH or install the project as a package.

For help on available options, run:
    python run_moodboard.py --help
"""
import sys
# Source code in src/ subdirectory
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import moodboard.cli as mb_cli

if __name__ == "__main__":
    sys.exit(mb_cli.main())
