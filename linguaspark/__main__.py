import sys

from linguaspark.cli import main

sys.exit(main())
