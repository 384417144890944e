"""xid command line tool: generate, decode and validate XIDs."""

import argparse
import json
import sys

from config import OutputFormat, load_config
from core.errors import BaseXidError, ConfigError, MalformedInput
from identifier import XID, get_generator, validate
from internal.logging import LogLevel, StructuredLogger
from utils.crash import configure as configure_crash, install_crash_handler
from utils.render import describe

STDIN = "-"


def build_parser():
    parser = argparse.ArgumentParser(prog="xid", description="Generate, decode and validate XIDs.")
    parser.add_argument("-v", dest="verbose", action="store_true", help="Verbose output")
    parser.add_argument("-n", dest="count", type=int, default=None, help="Generate n xid")
    parser.add_argument(
        "--format",
        dest="format",
        default=None,
        choices=[member.value for member in OutputFormat],
        help="Output format",
    )
    parser.add_argument("-s", "--separator", default=None, help="Separator between generated ids")
    parser.add_argument("-o", dest="output", default=None, help="Output file")
    parser.add_argument("--config", default=None, help="Config file (JSON)")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--decode", metavar="XID", default=None, help="Decode xid, '-' reads stdin")
    mode.add_argument("--validate", metavar="XID", default=None, help="Validate xid, '-' reads stdin")
    return parser


def _read_lines(stdin):
    for line in stdin:
        line = line.strip()
        if line:
            yield line


class Shell:
    """Runs one command against an output sink (bytes) and an error stream (text)."""

    def __init__(self, out, err, stdin, logger, verbose=False):
        self.out = out
        self.err = err
        self.stdin = stdin
        self.logger = logger
        self.verbose = verbose

    def write(self, text):
        self.out.write(text.encode("utf-8"))

    def generate(self, count, fmt, separator):
        generator = get_generator()
        ids = [generator.generate() for _ in range(count)]
        self.logger.debug("Generated xids", count=count, format=fmt.value)

        if not ids:
            return 0
        if fmt is OutputFormat.BINARY:
            for xid in ids:
                self.out.write(bytes(xid))
        elif self.verbose:
            self.write("\n".join(describe(xid, include_id=True) for xid in ids))
        else:
            self.write(separator.join(str(xid) for xid in ids) + "\n")
        return 0

    def decode(self, value):
        values = _read_lines(self.stdin) if value == STDIN else [value]
        for text in values:
            try:
                xid = XID.from_string(text)
            except MalformedInput as exc:
                self.logger.debug("Decode failed", value=text, error_id=exc.error_id)
                print(f"Decode error: {exc.message}", file=self.err)
                return 1
            self.write(describe(xid))
        return 0

    def validate(self, value):
        stream = value == STDIN
        values = _read_lines(self.stdin) if stream else [value]
        for text in values:
            try:
                validate(text)
            except MalformedInput as exc:
                self.logger.debug("Validation failed", value=text, reason=exc.reason)
                message = f"Invalid {json.dumps(text, ensure_ascii=False)}" if stream else "Invalid ID"
                if self.verbose:
                    self.write(message + "\n")
                else:
                    print(message, file=self.err)
                return 1
        return 0


def run(argv=None, stdin=None, stdout=None, stderr=None):
    """Entry point with injectable streams; stdout receives bytes. Returns the exit code."""
    stdin = stdin or sys.stdin
    stderr = stderr or sys.stderr
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        level = LogLevel.parse(config.logging.level)
    except ConfigError as exc:
        print(f"Config error: {exc.message}", file=stderr)
        return 1
    configure_crash(config.logging.crash_file)
    logger = StructuredLogger.configure(min_level=level, stream=stderr).bind(component="cli")

    count = args.count if args.count is not None else config.generator.count
    fmt = OutputFormat.parse(args.format) if args.format else config.generator.format
    separator = args.separator if args.separator is not None else config.generator.separator
    if count < 0:
        print(f"Invalid count: {count}", file=stderr)
        return 1

    if args.output:
        try:
            out = open(args.output, "wb")
        except OSError as exc:
            print(f"Open file error: {exc}", file=stderr)
            return 1
    else:
        out = stdout or sys.stdout.buffer

    shell = Shell(out, stderr, stdin, logger, verbose=args.verbose)
    try:
        if args.decode is not None:
            return shell.decode(args.decode)
        if args.validate is not None:
            return shell.validate(args.validate)
        return shell.generate(count, fmt, separator)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"I/O error: {exc}", file=stderr)
        return 1
    except BaseXidError as exc:
        logger.error("Command failed", error=exc, error_id=exc.error_id)
        print(exc.message, file=stderr)
        return 1
    finally:
        if args.output:
            out.close()
        else:
            out.flush()


def main():
    install_crash_handler()
    sys.exit(run())


if __name__ == "__main__":
    main()
