# eel serves calls on gevent greenlets; patch blocking I/O before anything imports it
from gevent import monkey

monkey.patch_all()

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from weatherview.ui.app import main as run_app


def main():
    """Entry point for the weather charts application."""
    print("🌤️ Weather View")
    print("=" * 50)
    run_app()


if __name__ == "__main__":
    main()
