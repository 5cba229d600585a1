from rich.pretty import pprint

from switchyard import *

__prog__ = "copy"

parser = OptionParser(
    flag("-v", "--verbose", descr="print every copied file"),
    Option("-o", "--output", arity=1, mode=Mode.REQUIRED, metavar="DIR", descr="destination directory"),
    Option("-j", "--jobs", type=Integer(), default=1, descr="number of workers"),
    Option("-e", "--exclude", arity="*", metavar="GLOB", descr="patterns to skip"),
    Option("--mode", type=Choice("fast", "safe"), default="safe", descr="copy strategy"),
    descr="copy files into a directory",
    shell=True,
)


if __name__ == '__main__':
    result = parser.parse()
    pprint(result)
