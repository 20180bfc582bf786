from rich.pretty import pprint

from pennant import *


include = Option("--include", "-I", OptionFlag.MULTI, "Directories to search", value_name="DIR")
verbose = Option("--verbose", "-v", description="Print more output")


if __name__ == '__main__':
    pprint([include, verbose])
