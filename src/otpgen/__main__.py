import sys

from otpgen.cli import main

sys.exit(main())
