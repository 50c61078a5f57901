# File Chain (see DESIGN.md):
# Doc Version: v1.0.0
#
# - Called by: Python interpreter when running `python -m bgpgen`
# - Calls into: src/bgpgen/main.main()
"""Allow running the package with python -m bgpgen (same as the bgpgen console script)."""
from bgpgen.main import main
import sys
sys.exit(main())
