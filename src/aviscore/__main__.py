import sys

from aviscore.cli import main

sys.exit(main())
