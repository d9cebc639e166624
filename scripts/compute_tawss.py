#!/usr/bin/env python3
"""
Time-averaged wall shear stress for a case directory.

Calculates the wall shear stress on all patches for the selected times and
writes its running time average after every time.

Usage:
    python compute_tawss.py <case>
    python compute_tawss.py <case> --compressible
    python compute_tawss.py <case> --time 0.1:1.0 --vtk
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from wallshear.cli import main


if __name__ == "__main__":
    sys.exit(main())
