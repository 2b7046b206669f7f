import sys

from fn_chain.cli import main

sys.exit(main())
