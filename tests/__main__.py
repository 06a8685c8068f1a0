"""
fontatlas test suite
"""

import unittest

from tests.test_basetypes import *
from tests.test_packer import *
from tests.test_fnt import *
from tests.test_sources import *
from tests.test_font import *
from tests.test_atlas import *
from tests.test_meta import *
from tests.test_cli import *


if __name__ == '__main__':
    unittest.main()
