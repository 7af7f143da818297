import sys

from configseal.cli import main

sys.exit(main())
