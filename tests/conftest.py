import sys

# archinstall parses sys.argv with its installer options on first import;
# pytest's own command line must not reach it.
sys.argv = sys.argv[:1]
