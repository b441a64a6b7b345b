"""python -m lash_mapping"""

import sys

from .cli import main

sys.exit(main())
