import sys

from qfjgen.cli import main

sys.exit(main())
