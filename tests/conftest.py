import sys
from pathlib import Path

# Add repo root to path so the explore entry point imports without installation
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))
