import sys

from letor.cli.main import main

sys.exit(main())
