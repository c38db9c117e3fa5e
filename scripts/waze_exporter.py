#!/usr/bin/env python3
# scripts/waze_exporter.py
# -*- coding: utf-8 -*-

from __future__ import annotations

# --- path bootstrap (must be the first lines of the file) ---
from pathlib import Path
import sys
ROOT = Path(__file__).resolve().parents[1]  # repo root (one level above /scripts)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# ------------------------------------------------------------

from travel_exporter.app.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
