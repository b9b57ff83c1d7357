import sys
from pathlib import Path

# Tests import the refparser package straight from the source tree.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
