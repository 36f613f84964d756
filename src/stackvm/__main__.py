"""Allow `python -m stackvm`."""

import sys

from stackvm.stackvm_cli import main


if __name__ == '__main__':
    sys.exit(main())
