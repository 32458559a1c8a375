"""Static detection of scripts that expose a self-test entry point.

A script is testable when it dispatches on the ``-t`` / ``--test`` flag,
either through a ``case`` branch label or an ``if`` comparison against the
quoted flag literal. Detection is pattern based and runs on one line at a
time, after shell comments have been stripped.

Recognized::

    -t|--test)                       # case label, either order, any spacing
    --other|-t)
    '-t'|"--test")                   # quoted labels
    if [[ "$1" == "-t" ]]; then
    if [[ "$a" == "b" || "$1" == "--test" ]]; then

Rejected::

    # -t|--test)                     # commented out
    case "$1" in --teaast) ;;        # longer flag sharing a prefix
    ss -tlpn | column -t             # option cluster of another command
    echo $(ls -t)                    # command substitution
    echo "this is a test"            # prose

Known limitations::

    echo "Use -t|--test) for tests"  # label-like text in a string: testable
    echo "if you pass '-t' it runs"  # quoted flag after "if": testable

Quotes are not tracked, so text inside a string literal that looks like a
label or an if comparison is still counted as a dispatch.
"""

import logging
import re

from selftest_runner.models.script import ClassificationResult, ScriptCandidate

log = logging.getLogger(__name__)

SHORT_FLAG = "-t"
LONG_FLAG = "--test"
TEST_FLAG = LONG_FLAG

_FLAG = rf"(?<![\w-])(?:{SHORT_FLAG}|{LONG_FLAG})(?![\w-])"

# A case label: the text before the flag holds no "=", single quote or
# parenthesis, except for one optional "(" that is not part of "$(". The flag
# itself may be single or double quoted.
CASE_LABEL_PATTERN = re.compile(
    r"^\s*[^=()'\n]*(?<!\$)\(?\s*[\"']?" + _FLAG + r"[^()\n]*\)"
)

# An if/elif test comparing against the quoted flag literal.
IF_TEST_PATTERN = re.compile(
    rf"(?<![\w-])(?:el)?if\s+.*[\"'](?:{SHORT_FLAG}|{LONG_FLAG})[\"']"
)

COMMENT_PATTERN = re.compile(r"(?:^|\s)#.*$")


def strip_comment(line: str) -> str:
    """Drop a trailing shell comment from a line.

    ``#`` only starts a comment at the beginning of a word, so ``$#`` and
    ``${#var}`` are kept.
    """
    return COMMENT_PATTERN.sub("", line)


def is_dispatch_line(line: str) -> bool:
    """Whether a single source line dispatches on the test flag."""
    code = strip_comment(line)
    if not code.strip():
        return False
    return bool(CASE_LABEL_PATTERN.search(code) or IF_TEST_PATTERN.search(code))


def is_testable(source_text: str) -> bool:
    """Whether the source text exposes a self-test entry point."""
    return any(is_dispatch_line(line) for line in source_text.splitlines())


def classify_script(script: ScriptCandidate) -> ClassificationResult:
    """Classify a discovered script by reading its source.

    A script that cannot be read is reported as not testable.
    """
    try:
        source = script.path.read_text(errors="replace")
    except OSError as exc:
        log.warning("Cannot read %s, treating as not testable: %s", script.name, exc)
        return ClassificationResult(script=script, testable=False)

    testable = is_testable(source)
    log.debug("Classified %s: testable=%s", script.name, testable)
    return ClassificationResult(script=script, testable=testable)
