import sys
from pathlib import Path

# Add src to path
current_dir = Path(__file__).parent.resolve()
src_path = current_dir / "src"
sys.path.append(str(src_path))

# Force UTF-8 for Windows console, team flags and names are not ASCII-safe
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding='utf-8')
    sys.stderr.reconfigure(encoding='utf-8')

from livescore_notifier.cli import main

if __name__ == "__main__":
    sys.exit(main())
