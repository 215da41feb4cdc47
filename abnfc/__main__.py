# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
import sys

from abnfc.cli import main

if __name__ == '__main__':
    sys.exit(main())
