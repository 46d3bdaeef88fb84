# Copyright (C) the diffstat-check contributors
#
# This module is part of diffstat-check and is released under the
# 3-Clause BSD License: https://opensource.org/license/bsd-3-clause/

import sys

from diffstatcheck.main import main

sys.exit(main())
