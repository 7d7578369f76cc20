"""Bartender entrypoint: interactive and batch drivers for the order recognizer."""

import argparse
import logging
import os
import sys

from bartender_lang import (
    ConsoleIO,
    IOHandler,
    NotUnderstood,
    Recognizer,
)

PROMPT = "Your order? "
APOLOGY = "I'm sorry, I don't understand. Try again?"


def run_repl(recognizer: Recognizer, io: IOHandler) -> int:
    served = 0
    while True:
        line = io.read_input(PROMPT)
        if line is None:
            break
        try:
            order = recognizer.recognize(line)
        except NotUnderstood:
            io.emit(APOLOGY)
            continue
        if order.terminal:
            break
        io.emit(order.confirmation())
        served += 1
    return served


def run_batch(recognizer: Recognizer, path: str, io: IOHandler) -> int:
    understood = 0
    with open(path, "r", encoding="utf-8") as f:
        for raw in f:
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue
            try:
                outcome = repr(recognizer.recognize(line))
                understood += 1
            except NotUnderstood:
                outcome = "NOT UNDERSTOOD"
            io.emit(f"Parsing: '{line}': {outcome}")
    return understood


def main():
    parser = argparse.ArgumentParser(description="Bartender drink order recognizer")
    parser.add_argument(
        "--batch", metavar="FILE", help="Recognize every line of FILE and exit"
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("BARTENDER_LOG_LEVEL", "WARNING"),
        help="Logging level (default: $BARTENDER_LOG_LEVEL or WARNING)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    recognizer = Recognizer()
    io = ConsoleIO()

    if not args.batch:
        run_repl(recognizer, io)
        return

    try:
        run_batch(recognizer, args.batch, io)
    except OSError as e:
        print(f"Cannot read batch file: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
