import sys

from vectorium.cli import main

sys.exit(main())
