"""CLI entry point for curlparse."""

import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from .config import OUTPUT_FORMATS, load_config
from .curl import dollar_quote, parse_curl_command


@dataclass
class CliFlags:
    """Parsed curlparse-specific flags."""
    output: Optional[str] = None  # None means "use the config file"
    verbose: bool = False
    config_path: Optional[str] = None
    help: bool = False


def extract_cli_flags(args: list[str]) -> tuple[CliFlags, list[str]]:
    """Extract leading curlparse flags from args, return (flags, command_words).

    Flags are only recognized before the curl command starts, so curl's own
    options (like -v) pass through untouched. "--" ends the flags explicitly.
    """
    flags = CliFlags()

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("--json", "--http", "--url"):
            flags.output = arg[2:]
            i += 1
        elif arg in ("--verbose", "-v"):
            flags.verbose = True
            i += 1
        elif arg == "--config":
            if i + 1 < len(args):
                flags.config_path = args[i + 1]
                i += 2
            else:
                i += 1
        elif arg in ("--help", "-h"):
            flags.help = True
            i += 1
        elif arg == "--":
            i += 1
            break
        else:
            break

    return flags, args[i:]


def print_help() -> None:
    """Print curlparse help."""
    print("curlparse - Turn a curl command line into a structured HTTP request")
    print()
    print("Usage: curlparse [options] [curl command...]")
    print()
    print("A single argument is taken as the whole command; several arguments are")
    print("shell-quoted back together. With none, the command is read from stdin.")
    print()
    print("Options (must come before the curl command):")
    print("  --json           Print the request as JSON (default)")
    print("  --http           Print the request as a raw HTTP/1.1 message")
    print("  --url            Print only the rebuilt base URL")
    print("  --verbose, -v    Print parser diagnostics to stderr")
    print("  --config <path>  Read settings from this YAML file")
    print("  --help, -h       Show this help")
    print()
    print("Examples:")
    print("  curlparse curl 'https://api.example.com/v1/users' -H 'Accept: application/json'")
    print("  pbpaste | curlparse --http")


def join_words(words: list[str]) -> str:
    """Rebuild a command from shell-split words.

    The shell already stripped the quoting, so every word that isn't a flag
    is quoted again as $'...', which decodes back to the exact word even when
    it holds quotes or backslashes.
    """
    return " ".join(word if word.startswith("-") else dollar_quote(word) for word in words)


def _printable(text: str, stream: TextIO) -> str:
    """Backslash-escape whatever the stream can't encode, such as lone surrogates."""
    encoding = getattr(stream, "encoding", None) or "utf-8"
    return text.encode(encoding, "backslashreplace").decode(encoding)


def _stderr_log(message: str) -> None:
    print(_printable(f"curlparse: {message}", sys.stderr), file=sys.stderr)


def run(args: Optional[list[str]] = None, stdin: Optional[TextIO] = None) -> int:
    """Run curlparse with the given arguments. Returns exit code."""
    if args is None:
        args = sys.argv[1:]
    if stdin is None:
        stdin = sys.stdin

    flags, words = extract_cli_flags(args)

    if flags.help:
        print_help()
        return 0

    config = load_config(flags.config_path)
    verbose = flags.verbose or config.verbose
    output = flags.output or config.output
    if output not in OUTPUT_FORMATS:
        output = "json"

    if verbose:
        _stderr_log(f"using config {config.source or '(built-in defaults)'}: {config.to_dict()}")

    if not words:
        command = stdin.read()
    elif len(words) == 1:
        command = words[0]
    else:
        command = join_words(words)
    if not command.strip():
        print("curlparse: no curl command given", file=sys.stderr)
        print("Try 'curlparse --help' for more information.", file=sys.stderr)
        return 1

    request = parse_curl_command(
        command,
        log=_stderr_log if verbose else None,
        max_length=config.max_command_length,
    )
    if request is None:
        print("curlparse: no valid request found in curl command", file=sys.stderr)
        return 1

    if output == "http":
        message = request.to_http()
        if not message.endswith("\n"):
            message += "\n"
    elif output == "url":
        message = request.base_url + "\n"
    else:
        message = request.to_json() + "\n"
    sys.stdout.write(_printable(message, sys.stdout))

    return 0


def main() -> None:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
