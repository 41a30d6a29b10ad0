"""
CLI for parsing hand histories and producing notes.

Usage:
    python -m hhnotes --input hands.txt --opponent "ThatWas 86761294" --output notes.jsonl
    python -m hhnotes -i hand.txt -p 86761294 --notes dictated.json
"""
import argparse
import json
import logging
import sys

from hhnotes.notes.enrich import merge, normalize_units
from hhnotes.notes.synthesizer import synthesize
from hhnotes.parse.runner import ParserRunner
from hhnotes.parse.schemas import NoteFields

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("hhnotes")


def load_notes(path: str) -> NoteFields:
    """Dictated per-street notes from a JSON object file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return NoteFields(**{k: str(v or "") for k, v in data.items() if k in NoteFields.model_fields})


def build_records(text: str, opponent: str, dictated=None):
    """One output record per hand in the text."""
    runner = ParserRunner(opponent)
    for _, parsed in runner.iter_text(text):
        if dictated is not None:
            notes = merge(normalize_units(dictated, parsed), parsed)
        else:
            notes = synthesize(parsed)
        yield {
            "hand_id": parsed.hand_id,
            "target_player": parsed.target_player,
            "position": parsed.position_of(parsed.target_player) if parsed.target_player else "",
            "showdown_mandatory": parsed.showdown.mandatory,
            "notes": notes.model_dump(),
        }


def main():
    parser = argparse.ArgumentParser(
        description='Parse Omaha hand histories and build per-street notes'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Hand history text file (one or more hands)'
    )
    parser.add_argument(
        '--opponent', '-p',
        required=True,
        help='Target player identifier (name or numeric id)'
    )
    parser.add_argument(
        '--notes', '-n',
        help='JSON file with dictated notes to merge (preflop/flop/turn/river/presupposition)'
    )
    parser.add_argument(
        '--output', '-o',
        help='Output JSONL file (default: stdout)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        text = ParserRunner().read_file(args.input)
        if not text:
            print(f"❌ Error: nothing to read from {args.input}")
            sys.exit(1)

        dictated = load_notes(args.notes) if args.notes else None
        records = list(build_records(text, args.opponent, dictated))

        out = open(args.output, "w", encoding="utf-8") if args.output else sys.stdout
        try:
            for record in records:
                out.write(json.dumps(record, ensure_ascii=False) + "\n")
        finally:
            if args.output:
                out.close()

        logger.info(f"Wrote notes for {len(records)} hands")

    except (OSError, ValueError) as e:
        print(f"❌ Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
