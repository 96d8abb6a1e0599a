import sys

from denv.cli import main

sys.exit(main())
