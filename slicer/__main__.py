#!/usr/bin/env python3
import sys

from tools.program_slicer import main

sys.exit(main())
