"""Allow ``python -m dbdump``."""

import sys

from dbdump.cli import main

sys.exit(main())
