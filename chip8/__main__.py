import sys

from .window import main

sys.exit(main())
