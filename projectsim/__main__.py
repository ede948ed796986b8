import sys

from .run_simulation import main

sys.exit(main())
