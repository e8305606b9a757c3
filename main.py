import sys

from tastebuddy.cli import main as run

if __name__ == '__main__':
    sys.exit(run())
