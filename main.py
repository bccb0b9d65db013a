from rich.pretty import pprint

from argosy import *

__prog__ = "echoes"

text = option("-s", "--string", required=True, descr="the string to print")
times = option("-n", "--number", type=int, default=1, metavar="N", descr="how many times to print it")
verbose = multi_flag("-v", "--verbose", descr="show the parsed declarations")
files = multi_cardinal("FILES", type=path, descr="files to mention after the string")


if __name__ == '__main__':
    parse()
    for _ in range(times.value):
        print(text.value, *files)
    if verbose:
        pprint([text, times, verbose, files])
