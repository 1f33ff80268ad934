import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Settings are read once at import; keep tests offline and free of rate limits.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("ANALYTICS_ENABLED", "0")
os.environ.setdefault("AI_PROVIDER", "groq")
