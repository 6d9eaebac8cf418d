import sys

from healthmate_sleep.cli import main

sys.exit(main())
