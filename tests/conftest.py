import sys
from pathlib import Path

import matplotlib

# Allow importing aurora_field from repository root
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

matplotlib.use("Agg")
