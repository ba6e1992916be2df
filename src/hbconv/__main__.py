import sys

from hbconv.cli import main

sys.exit(main())
