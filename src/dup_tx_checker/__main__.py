import sys

from dup_tx_checker.cli import main

sys.exit(main())
