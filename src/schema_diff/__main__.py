import sys

from schema_diff.cli.main import main

sys.exit(main())
