import subprocess
import sys
from pathlib import Path


def main() -> int:
    """Start the Streamlit chat terminal.

    Returns:
        Process exit code.
    """
    app_path = Path(__file__).resolve().parent / "app.py"
    cmd = [sys.executable, "-m", "streamlit", "run", str(app_path), *sys.argv[1:]]
    return subprocess.call(cmd)


if __name__ == "__main__":
    sys.exit(main())
