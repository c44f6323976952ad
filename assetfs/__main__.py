import sys

from assetfs.cli import main

sys.exit(main())
