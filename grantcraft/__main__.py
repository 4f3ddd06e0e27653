import sys

from grantcraft.cli import main

sys.exit(main())
