import sys

from oxidoc.cli import main

sys.exit(main())
