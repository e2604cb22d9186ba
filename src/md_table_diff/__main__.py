"""Allow ``python -m md_table_diff``."""

import sys

from md_table_diff.cli import main

sys.exit(main())
