import sys

from plantctl.main import main

sys.exit(main())
