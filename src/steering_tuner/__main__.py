import sys

from steering_tuner.cli import main

sys.exit(main())
