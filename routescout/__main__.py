import sys

from routescout.cli import main

sys.exit(main())
